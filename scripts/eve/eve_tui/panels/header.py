"""Tab bar and status bar renderers."""

from __future__ import annotations

from datetime import datetime

from rich.panel import Panel
from rich.text import Text


def render_tabs(titles: list[str], selected: int) -> Panel:
    text = Text()
    for index, title in enumerate(titles):
        style = "reverse bold" if index == selected else "default"
        text.append(f" {title} ", style=style)
        text.append(" ")
    return Panel(
        text,
        title="[bold]EVE Monitor[/bold]",
        subtitle="Use ctrl + ◄ ► to change tab",
        subtitle_align="right",
        border_style="cyan",
    )


def render_status_bar(now: datetime | None, notice: str, debug: bool) -> Panel:
    clock = now.strftime("%H:%M:%S") if now is not None else "--:--:--"
    text = Text(f"{clock}   ", style="bold")
    if notice:
        text.append(notice, style="yellow")
    else:
        text.append("Tab: next field   Enter: select   Esc: close dialog", style="dim")
    if debug:
        text.append("   [debug: ^E quit ^R redraw ^P pop ^A crash]", style="magenta")
    return Panel(text, border_style="cyan")
