"""Dialog for editing the IP configuration of one network interface."""

from __future__ import annotations

from ipaddress import IPv4Address, ip_address, ip_interface
from typing import TYPE_CHECKING

from rich.text import Text

from eve_tui.actions import InterfaceConfigRequested
from eve_tui.formatting import join_or_dash
from eve_tui.layout import stack_rows
from eve_tui.messages import DhcpType
from eve_tui.models import InterfaceConfig, NetworkInterface
from eve_tui.ui.dialog import Dialog
from eve_tui.ui.widgets import Choice, TextInput
from eve_tui.ui.window import WidgetWindow

if TYPE_CHECKING:
    from eve_tui.actions import UiAction
    from eve_tui.events import KeyEvent
    from eve_tui.layout import Rect
    from eve_tui.state import ModelSnapshot
    from eve_tui.ui.frame import Frame

DIALOG_SIZE = (64, 13)
MODES = ["DHCP", "Static"]
OK = "Ok"


def _ipv4_prefill(iface: NetworkInterface) -> str:
    for address in iface.addresses:
        if isinstance(address, IPv4Address):
            if iface.subnet is not None and address in iface.subnet:
                return f"{address}/{iface.subnet.prefixlen}"
            return str(address)
    return ""


def _first_ipv4(addresses) -> str:
    for address in addresses or ():
        if isinstance(address, IPv4Address):
            return str(address)
    return ""


class IpConfigForm(WidgetWindow):
    def __init__(self, iface: NetworkInterface) -> None:
        super().__init__(f"ipconfig-{iface.name}")
        self.interface = iface.name
        self.error = ""
        self.mode = Choice("Mode", MODES, selected=1 if iface.dhcp == DhcpType.STATIC else 0)
        self.address = TextInput("Address", _ipv4_prefill(iface))
        self.gateway = TextInput("Gateway", _first_ipv4(iface.gateways))
        dns = [str(d) for d in iface.dns_servers if isinstance(d, IPv4Address)]
        self.dns = TextInput("DNS", ",".join(dns))
        self.add_widget("mode", self.mode)
        self.add_widget("address", self.address)
        self.add_widget("gateway", self.gateway)
        self.add_widget("dns", self.dns)
        self._sync_mode()
        self.set_focused("mode")

    @property
    def is_static(self) -> bool:
        return self.mode.value == "Static"

    def _sync_mode(self) -> None:
        for field in (self.address, self.gateway, self.dns):
            field.enabled = self.is_static

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        action = super().handle_key_event(key)
        self._sync_mode()
        return action

    def build_config(self) -> InterfaceConfig:
        """Validate the form; raises ``ValueError`` with a user-facing message."""
        if not self.is_static:
            return InterfaceConfig(dhcp=True)
        if "/" not in self.address.value:
            raise ValueError("address must be in CIDR form, e.g. 192.168.1.10/24")
        try:
            address = ip_interface(self.address.value.strip())
        except ValueError:
            raise ValueError(f"invalid address: {self.address.value}") from None
        gateway = None
        if self.gateway.value.strip():
            try:
                gateway = ip_address(self.gateway.value.strip())
            except ValueError:
                raise ValueError(f"invalid gateway: {self.gateway.value}") from None
            if gateway not in address.network:
                raise ValueError(f"gateway {gateway} is outside {address.network}")
        dns = []
        for item in self.dns.value.split(","):
            if not item.strip():
                continue
            try:
                dns.append(ip_address(item.strip()))
            except ValueError:
                raise ValueError(f"invalid DNS server: {item.strip()}") from None
        return InterfaceConfig(dhcp=False, address=address, gateway=gateway, dns_servers=tuple(dns))

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        rows = stack_rows(area, [1, 1, 1, 1, 1, 1, 1, 2])
        frame.render(Text(f"Interface {self.interface}", style="bold"), rows[0])
        iface = model.interface(self.interface)
        if iface is not None:
            frame.render(Text(f"current: {join_or_dash(iface.addresses)}", style="dim"), rows[1])
        self.mode.render(frame, rows[3], model, focused)
        self.address.render(frame, rows[4], model, focused)
        self.gateway.render(frame, rows[5], model, focused)
        self.dns.render(frame, rows[6], model, focused)
        if self.error:
            frame.render(Text(self.error, style="bold red"), rows[7])


def submit_ip_config(name: str, content: WidgetWindow) -> UiAction | None:
    if name != OK or not isinstance(content, IpConfigForm):
        return None
    try:
        config = content.build_config()
    except ValueError as exc:
        content.error = str(exc)
        return None
    content.error = ""
    return InterfaceConfigRequested(content.interface, config)


def create_ip_dialog(iface: NetworkInterface) -> Dialog:
    return Dialog(
        f"Edit {iface.name}",
        DIALOG_SIZE,
        [OK, "Cancel"],
        IpConfigForm(iface),
        on_button=submit_ip_config,
    )
