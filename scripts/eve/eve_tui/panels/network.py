"""Network interface renderers."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from eve_tui.formatting import dhcp_label, join_or_dash
from eve_tui.models import NetworkInterface
from eve_tui.panels import empty_panel, kv_table, panel_from_table


def render_interfaces(network: tuple[NetworkInterface, ...], selected: int | None = None) -> Panel:
    table = Table(box=None, expand=True)
    table.add_column("Name", no_wrap=True)
    table.add_column("Mgmt", no_wrap=True)
    table.add_column("Link", no_wrap=True)
    table.add_column("Mode", no_wrap=True)
    table.add_column("Addresses", overflow="fold")

    if not network:
        table.add_row("-", "-", "-", "-", Text("No interfaces reported", style="dim"))
    for index, iface in enumerate(network):
        row_style = "reverse" if index == selected else None
        table.add_row(
            iface.name,
            "yes" if iface.is_mgmt else "no",
            Text("up", style="green") if iface.up else Text("down", style="red"),
            dhcp_label(iface.dhcp),
            join_or_dash(iface.addresses),
            style=row_style,
        )

    status = "warn" if any(iface.last_error for iface in network) else "ok"
    return panel_from_table("Interfaces", status, table)


def render_interface_detail(iface: NetworkInterface | None) -> Panel:
    if iface is None:
        return empty_panel("Details", "Select an interface")
    rows = [
        ("Name", iface.name),
        ("MAC", iface.mac or "-"),
        ("Mode", dhcp_label(iface.dhcp)),
        ("Subnet", str(iface.subnet) if iface.subnet else "-"),
        ("Addresses", join_or_dash(iface.addresses)),
        ("Gateways", join_or_dash(iface.gateways)),
        ("DNS", join_or_dash(iface.dns_servers)),
    ]
    if iface.last_error:
        rows.append(("Last error", iface.last_error))
    return panel_from_table(f"Details: {iface.name}", "warn" if iface.last_error else "ok", kv_table(rows))


def render_management_summary(network: tuple[NetworkInterface, ...]) -> Panel:
    rows = [
        (iface.name, join_or_dash(iface.addresses))
        for iface in network
        if iface.is_mgmt
    ]
    if not rows:
        return empty_panel("Management", "No management interface")
    return panel_from_table("Management", "ok", kv_table(rows))
