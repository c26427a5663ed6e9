from __future__ import annotations

import unittest
from ipaddress import ip_address, ip_interface, ip_network
from pathlib import Path
import sys

from rich.console import Console

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from eve_tui.actions import DismissDialog, InterfaceConfigRequested  # noqa: E402
from eve_tui.events import KeyEvent  # noqa: E402
from eve_tui.messages import DhcpType  # noqa: E402
from eve_tui.models import InterfaceConfig, NetworkInterface  # noqa: E402
from eve_tui.state import ModelSnapshot  # noqa: E402
from eve_tui.ui.frame import Frame  # noqa: E402
from eve_tui.ui.ipdialog import create_ip_dialog  # noqa: E402

ENTER = KeyEvent("enter")


def static_iface() -> NetworkInterface:
    return NetworkInterface(
        name="eth0",
        is_mgmt=True,
        addresses=(ip_address("192.168.1.5"), ip_address("fe80::1")),
        gateways=(ip_address("192.168.1.1"),),
        dhcp=DhcpType.STATIC,
        subnet=ip_network("192.168.1.0/24"),
        dns_servers=(ip_address("1.1.1.1"), ip_address("9.9.9.9")),
    )


def dhcp_iface() -> NetworkInterface:
    return NetworkInterface(name="eth1", is_mgmt=False, addresses=(), gateways=None, dhcp=DhcpType.CLIENT)


def replace_text(dialog, field: str, text: str) -> None:
    dialog.content.set_focused(field)
    for _ in range(64):
        dialog.handle_key_event(KeyEvent("backspace"))
    for ch in text:
        dialog.handle_key_event(KeyEvent(ch))


def press(dialog, button: str):
    dialog.content.set_focused(button)
    return dialog.handle_key_event(ENTER)


class IpDialogTests(unittest.TestCase):
    def test_prefilled_from_interface(self):
        form = create_ip_dialog(static_iface()).content
        self.assertEqual(form.mode.value, "Static")
        self.assertEqual(form.address.value, "192.168.1.5/24")
        self.assertEqual(form.gateway.value, "192.168.1.1")
        self.assertEqual(form.dns.value, "1.1.1.1,9.9.9.9")
        self.assertEqual(form.get_focused_view(), "mode")

    def test_dhcp_disables_static_fields(self):
        dialog = create_ip_dialog(dhcp_iface())
        self.assertFalse(dialog.content.address.enabled)
        dialog.handle_key_event(KeyEvent("tab"))
        self.assertEqual(dialog.get_focused_view(), "Ok")

    def test_switching_to_static_enables_fields(self):
        dialog = create_ip_dialog(dhcp_iface())
        dialog.handle_key_event(KeyEvent("right"))
        self.assertTrue(dialog.content.is_static)
        dialog.handle_key_event(KeyEvent("tab"))
        self.assertEqual(dialog.get_focused_view(), "address")

    def test_ok_with_dhcp(self):
        dialog = create_ip_dialog(dhcp_iface())
        self.assertEqual(press(dialog, "Ok"), InterfaceConfigRequested("eth1", InterfaceConfig(dhcp=True)))

    def test_ok_with_static(self):
        dialog = create_ip_dialog(static_iface())
        replace_text(dialog, "address", "10.0.0.7/16")
        replace_text(dialog, "gateway", "10.0.0.1")
        replace_text(dialog, "dns", "10.0.0.53")
        action = press(dialog, "Ok")
        self.assertEqual(
            action,
            InterfaceConfigRequested(
                "eth0",
                InterfaceConfig(
                    dhcp=False,
                    address=ip_interface("10.0.0.7/16"),
                    gateway=ip_address("10.0.0.1"),
                    dns_servers=(ip_address("10.0.0.53"),),
                ),
            ),
        )
        self.assertEqual(action.config.describe(), "static 10.0.0.7/16 gw 10.0.0.1 dns 10.0.0.53")

    def test_invalid_input_shows_error(self):
        cases = {
            "address": ("10.0.0.7", "CIDR"),
            "gateway": ("10.9.9.9", "outside"),
            "dns": ("8.8.8.x", "DNS"),
        }
        for field, (value, message) in cases.items():
            with self.subTest(field=field):
                dialog = create_ip_dialog(static_iface())
                replace_text(dialog, field, value)
                self.assertIsNone(press(dialog, "Ok"))
                self.assertIn(message, dialog.content.error)

    def test_error_cleared_after_valid_submit(self):
        dialog = create_ip_dialog(static_iface())
        replace_text(dialog, "address", "bogus/24")
        self.assertIsNone(press(dialog, "Ok"))
        self.assertTrue(dialog.content.error)
        replace_text(dialog, "address", "192.168.1.9/24")
        self.assertIsInstance(press(dialog, "Ok"), InterfaceConfigRequested)
        self.assertEqual(dialog.content.error, "")

    def test_cancel_and_escape(self):
        dialog = create_ip_dialog(static_iface())
        self.assertEqual(press(dialog, "Cancel"), DismissDialog("Edit eth0"))
        self.assertEqual(dialog.handle_key_event(KeyEvent("esc")), DismissDialog("Edit eth0"))

    def test_renders_error_line(self):
        dialog = create_ip_dialog(static_iface())
        replace_text(dialog, "address", "10.0.0.7")
        press(dialog, "Ok")
        frame = Frame(Console(width=100, height=30, color_system=None), 100, 30)
        dialog.render(frame, frame.area, ModelSnapshot(network=(static_iface(),)), True)
        text = frame.text()
        self.assertIn("Edit eth0", text)
        self.assertIn("Interface eth0", text)
        self.assertIn("CIDR", text)


if __name__ == "__main__":
    unittest.main()
