"""Kernel log renderer."""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text

from eve_tui.formatting import kmsg_style, kmsg_timestamp
from eve_tui.models import DmesgEntry
from eve_tui.panels import panel_from_text


def visible_entries(entries: tuple[DmesgEntry, ...], height: int, scroll: int) -> tuple[DmesgEntry, ...]:
    """The ``height`` entries ending ``scroll`` lines above the newest one."""
    if height <= 0:
        return ()
    end = max(0, len(entries) - max(0, scroll))
    start = max(0, end - height)
    return entries[start:end]


def render_dmesg(entries: tuple[DmesgEntry, ...], height: int, scroll: int = 0) -> Panel:
    # two rows go to the panel border
    shown = visible_entries(entries, max(0, height - 2), scroll)
    text = Text(no_wrap=True, overflow="ellipsis")
    if not shown:
        text.append("No kernel messages", style="dim")
    for index, entry in enumerate(shown):
        if index:
            text.append("\n")
        text.append(kmsg_timestamp(entry.timestamp_us), style="cyan")
        text.append(" ")
        text.append(entry.message, style=kmsg_style(entry.level))
    title = "Kernel log" if scroll == 0 else f"Kernel log (-{scroll})"
    return panel_from_text(title, "ok", text)
