"""Application instance renderers."""

from __future__ import annotations

from typing import Mapping
from uuid import UUID

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from eve_tui.formatting import enum_label
from eve_tui.models import AppError, AppInstance, AppInstanceState, AppInstanceSummary, AppNormal, is_app_error
from eve_tui.panels import kv_table, panel_from_table


def state_text(state: AppInstanceState) -> Text:
    if isinstance(state, AppNormal):
        return Text(enum_label(state.code), style="green")
    if isinstance(state, AppError):
        return Text(f"{enum_label(state.code)}: {state.reason}", style="red")
    raise TypeError(f"unknown app state: {state!r}")


def sorted_apps(apps: Mapping[UUID, AppInstance]) -> list[AppInstance]:
    return sorted(apps.values(), key=lambda app: (app.name.lower(), str(app.uuid)))


def render_apps(apps: Mapping[UUID, AppInstance], limit: int | None = None) -> Panel:
    table = Table(box=None, expand=True)
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Version", no_wrap=True)
    table.add_column("UUID", style="dim", no_wrap=True)
    table.add_column("State", overflow="fold")

    ordered = sorted_apps(apps)
    if not ordered:
        table.add_row("-", "-", "-", Text("No applications", style="dim"))
    for app in ordered[:limit]:
        table.add_row(app.name or "-", app.version or "-", str(app.uuid), state_text(app.state))

    errors = sum(1 for app in ordered if is_app_error(app.state))
    status = "error" if errors else "ok"
    return panel_from_table(f"Applications ({len(ordered)})", status, table)


def render_app_summary(summary: AppInstanceSummary) -> Panel:
    rows = [
        ("Running", str(summary.running)),
        ("Starting", str(summary.starting)),
        ("Stopping", str(summary.stopping)),
        ("Error", str(summary.error)),
    ]
    status = "error" if summary.error else "ok"
    return panel_from_table("App summary", status, kv_table(rows))
