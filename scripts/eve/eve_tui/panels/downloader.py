"""Downloader status renderer."""

from __future__ import annotations

from rich.panel import Panel

from eve_tui.formatting import compact_time, enum_label, human_bytes
from eve_tui.messages import DownloaderStatus
from eve_tui.panels import empty_panel, kv_table, panel_from_table


def render_downloader(status: DownloaderStatus | None) -> Panel:
    if status is None:
        return empty_panel("Downloader", "No downloads")
    rows = [
        ("Name", status.name or "-"),
        ("State", enum_label(status.state)),
        ("Progress", f"{status.progress}%"),
        ("Size", f"{human_bytes(status.current_size)} / {human_bytes(status.total_size)}"),
        ("Modified", compact_time(status.mod_time)),
    ]
    if status.error.is_error:
        rows.append(("Error", status.error.error))
    return panel_from_table("Downloader", "error" if status.error.is_error else "ok", kv_table(rows))
