"""Focusable form elements used inside dialogs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from rich import box
from rich.panel import Panel
from rich.text import Text

from eve_tui.actions import ButtonClicked
from eve_tui.events import KeyEvent
from eve_tui.ui.window import Widget

if TYPE_CHECKING:
    from eve_tui.actions import UiAction
    from eve_tui.layout import Rect
    from eve_tui.state import ModelSnapshot
    from eve_tui.ui.frame import Frame

FOCUSED_STYLE = "bold black on yellow"


class Button(Widget):
    def __init__(self, label: str) -> None:
        super().__init__()
        self.label = label

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        style = FOCUSED_STYLE if self.has_focus() else "bold"
        frame.render(
            Panel(
                Text(self.label, style=style, justify="center", no_wrap=True),
                box=box.ROUNDED,
                padding=0,
                border_style="yellow" if self.has_focus() else "white",
            ),
            area,
        )

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        if key.is_plain("enter") or key.is_plain(" "):
            return ButtonClicked(self.label)
        return None


class TextInput(Widget):
    def __init__(self, label: str, value: str = "", max_length: int = 64) -> None:
        super().__init__()
        self.label = label
        self.value = value
        self.max_length = max_length
        self.enabled = True

    def can_focus(self) -> bool:
        return self.enabled

    def renderable(self) -> Text:
        text = Text(f"{self.label:>10}: ", style="bold" if self.enabled else "dim")
        value_style = "reverse" if self.has_focus() else ("default" if self.enabled else "dim")
        text.append(self.value or " ", style=value_style)
        if self.has_focus():
            text.append("_", style="blink")
        return text

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        frame.render(self.renderable(), area)

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        if not self.enabled:
            return None
        if key.is_plain("backspace"):
            self.value = self.value[:-1]
        elif len(key.code) == 1 and key.code.isprintable() and key.is_plain(key.code):
            if len(self.value) < self.max_length:
                self.value += key.code
        return None


class Choice(Widget):
    def __init__(self, label: str, options: Sequence[str], selected: int = 0) -> None:
        super().__init__()
        if not options:
            raise ValueError("Choice needs at least one option")
        self.label = label
        self.options = list(options)
        self.selected = min(max(0, selected), len(self.options) - 1)

    @property
    def value(self) -> str:
        return self.options[self.selected]

    def renderable(self) -> Text:
        text = Text(f"{self.label:>10}: ", style="bold")
        for index, option in enumerate(self.options):
            marker = "(*)" if index == self.selected else "( )"
            style = FOCUSED_STYLE if self.has_focus() and index == self.selected else "default"
            text.append(f"{marker} {option}", style=style)
            text.append("  ")
        return text

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        frame.render(self.renderable(), area)

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        if key.is_plain("left"):
            self.selected = (self.selected - 1) % len(self.options)
        elif key.is_plain("right") or key.is_plain(" "):
            self.selected = (self.selected + 1) % len(self.options)
        return None
