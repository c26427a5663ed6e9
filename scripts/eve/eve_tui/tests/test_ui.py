from __future__ import annotations

import unittest
from ipaddress import ip_address, ip_network
from pathlib import Path
import sys

from rich.console import Console

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from eve_tui.actions import (  # noqa: E402
    ActionBus,
    ButtonClicked,
    DismissDialog,
    EditInterface,
    Notify,
    Quit,
    Redraw,
)
from eve_tui.events import TICK, KeyEvent, KeyModifiers  # noqa: E402
from eve_tui.models import NetworkInterface  # noqa: E402
from eve_tui.state import ModelSnapshot  # noqa: E402
from eve_tui.ui.dialog import Dialog  # noqa: E402
from eve_tui.ui.frame import Frame  # noqa: E402
from eve_tui.ui.pages import NetworkPage  # noqa: E402
from eve_tui.ui.ui import Ui, UiTabs  # noqa: E402
from eve_tui.ui.window import Window  # noqa: E402

CTRL = KeyModifiers.CONTROL


def ctrl(code: str) -> KeyEvent:
    return KeyEvent(code, CTRL)


class Scripted(Window):
    def __init__(self, name, key_action=None, tick_action=None, calls=None):
        self.name = name
        self.key_action = key_action
        self.tick_action = tick_action
        self.calls = calls if calls is not None else []

    def handle_key_event(self, key):
        self.calls.append((self.name, "key", key.code))
        return self.key_action

    def handle_tick(self):
        self.calls.append((self.name, "tick"))
        return self.tick_action


class TabTests(unittest.TestCase):
    def test_order(self):
        self.assertEqual(
            [tab.title for tab in UiTabs],
            ["Summary", "Home", "Network", "Applications", "Dmesg"],
        )

    def test_previous_next_clamp(self):
        self.assertEqual(UiTabs.SUMMARY.previous(), UiTabs.SUMMARY)
        self.assertEqual(UiTabs.DMESG.next(), UiTabs.DMESG)
        self.assertEqual(UiTabs.HOME.next(), UiTabs.NETWORK)
        self.assertEqual(UiTabs.HOME.previous(), UiTabs.SUMMARY)

    def test_from_name(self):
        self.assertEqual(UiTabs.from_name("network"), UiTabs.NETWORK)
        with self.assertRaises(ValueError):
            UiTabs.from_name("settings")


class UiRoutingTests(unittest.TestCase):
    def setUp(self):
        self.bus = ActionBus()
        self.ui = Ui(self.bus, debug=True)
        self.ui.init()

    def push(self, window):
        self.ui.push_layer(window)
        return window

    def test_dismiss_pops_the_top_layer(self):
        self.push(Scripted("dialog", key_action=DismissDialog("dialog")))
        self.assertIsNone(self.ui.handle_event(KeyEvent("esc")))
        self.assertEqual(len(self.ui.active_view), 1)
        self.assertIn(Redraw(), self.bus.drain())

    def test_ok_and_cancel_buttons_pop(self):
        for name in ("Ok", "Cancel"):
            with self.subTest(button=name):
                self.push(Scripted("dialog", key_action=ButtonClicked(name)))
                self.assertIsNone(self.ui.handle_event(KeyEvent("enter")))
                self.assertEqual(len(self.ui.active_view), 1)

    def test_other_buttons_are_dropped(self):
        self.push(Scripted("dialog", key_action=ButtonClicked("Apply")))
        self.assertIsNone(self.ui.handle_event(KeyEvent("enter")))
        self.assertEqual(len(self.ui.active_view), 2)

    def test_other_actions_returned_to_caller(self):
        self.push(Scripted("dialog", key_action=Notify("hi")))
        self.assertEqual(self.ui.handle_event(KeyEvent("x")), Notify("hi"))
        self.assertEqual(len(self.ui.active_view), 2)

    def test_keys_go_to_top_layer_only(self):
        calls = []
        self.push(Scripted("lower", calls=calls))
        self.push(Scripted("upper", calls=calls))
        self.ui.handle_event(KeyEvent("x"))
        self.assertEqual(calls, [("upper", "key", "x")])

    def test_tab_switch_clamps(self):
        self.ui.handle_event(ctrl("left"))
        self.assertEqual(self.ui.selected_tab, UiTabs.SUMMARY)
        for _ in range(10):
            self.ui.handle_event(ctrl("right"))
        self.assertEqual(self.ui.selected_tab, UiTabs.DMESG)
        self.ui.handle_event(ctrl("left"))
        self.assertEqual(self.ui.selected_tab, UiTabs.APPLICATIONS)

    def test_tab_switch_after_layer_consumed_key(self):
        calls = []
        self.push(Scripted("dialog", key_action=Notify("seen"), calls=calls))
        self.assertEqual(self.ui.handle_event(ctrl("right")), Notify("seen"))
        self.assertEqual(calls, [("dialog", "key", "right")])
        self.assertEqual(self.ui.selected_tab, UiTabs.HOME)

    def test_each_tab_keeps_its_own_stack(self):
        self.push(Scripted("dialog"))
        self.ui.handle_event(ctrl("right"))
        self.assertEqual(len(self.ui.active_view), 1)
        self.ui.handle_event(ctrl("left"))
        self.assertEqual(len(self.ui.active_view), 2)

    def test_tick_reaches_every_layer_and_status_bar(self):
        calls = []
        self.push(Scripted("lower", tick_action=Notify("lower"), calls=calls))
        self.push(Scripted("upper", tick_action=Notify("upper"), calls=calls))
        self.assertIsNone(self.ui.handle_event(TICK))
        self.assertEqual(calls, [("lower", "tick"), ("upper", "tick")])
        # the first tick also sets the status bar clock
        self.assertEqual(self.bus.drain(), [Notify("lower"), Notify("upper"), Redraw()])

    def test_unknown_event_type(self):
        with self.assertRaises(TypeError):
            self.ui.handle_event("x")


class DebugShortcutTests(unittest.TestCase):
    def test_debug_shortcuts(self):
        bus = ActionBus()
        ui = Ui(bus, debug=True)
        ui.init()
        ui.push_layer(Scripted("dialog"))

        self.assertIsNone(ui.handle_event(ctrl("e")))
        self.assertEqual(bus.drain(), [Quit()])
        ui.handle_event(ctrl("r"))
        self.assertEqual(bus.drain(), [Redraw()])
        ui.handle_event(ctrl("p"))
        self.assertEqual(len(ui.active_view), 1)
        # the page at the bottom is never popped
        ui.handle_event(ctrl("p"))
        self.assertEqual(len(ui.active_view), 1)
        with self.assertRaises(RuntimeError):
            ui.handle_event(ctrl("a"))

    def test_shortcuts_disabled_outside_debug(self):
        bus = ActionBus()
        ui = Ui(bus, debug=False)
        ui.init()
        calls = []
        ui.push_layer(Scripted("dialog", calls=calls))
        ui.handle_event(ctrl("e"))
        ui.handle_event(ctrl("a"))
        self.assertEqual(len(bus), 0)
        self.assertEqual(calls, [("dialog", "key", "e"), ("dialog", "key", "a")])


class UiPagesTests(unittest.TestCase):
    def test_network_page_enter_requests_edit(self):
        bus = ActionBus()
        ui = Ui(bus, initial_tab=UiTabs.NETWORK)
        ui.init()
        model = ModelSnapshot(
            network=(
                NetworkInterface(name="eth0", is_mgmt=True, addresses=(ip_address("10.0.0.2"),), gateways=None),
                NetworkInterface(name="eth1", is_mgmt=False, addresses=(), gateways=None),
            )
        )
        frame = Frame(Console(width=100, height=30, color_system=None), 100, 30)
        ui.render(frame, model)
        self.assertIsInstance(ui.active_view.last(), NetworkPage)
        ui.handle_event(KeyEvent("down"))
        self.assertEqual(ui.handle_event(KeyEvent("enter")), EditInterface("eth1"))

    def test_ip_dialog_pushed_and_dismissed(self):
        bus = ActionBus()
        ui = Ui(bus, initial_tab=UiTabs.NETWORK)
        ui.init()
        iface = NetworkInterface(
            name="eth0",
            is_mgmt=True,
            addresses=(ip_address("192.168.1.5"),),
            gateways=(ip_address("192.168.1.1"),),
            subnet=ip_network("192.168.1.0/24"),
        )
        dialog = ui.show_ip_dialog(iface)
        self.assertIsInstance(dialog, Dialog)
        self.assertIs(ui.active_view.last(), dialog)
        ui.handle_event(KeyEvent("esc"))
        self.assertIsInstance(ui.active_view.last(), NetworkPage)

    def test_full_screen_render(self):
        bus = ActionBus()
        ui = Ui(bus)
        ui.init()
        frame = Frame(Console(width=120, height=40, color_system=None), 120, 40)
        ui.render(frame, ModelSnapshot())
        text = frame.text()
        self.assertIn("Summary", frame.row_text(1))
        self.assertIn("Dmesg", frame.row_text(1))
        self.assertIn("--:--:--", text)


if __name__ == "__main__":
    unittest.main()
