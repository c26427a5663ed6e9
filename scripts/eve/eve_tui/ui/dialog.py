"""Modal dialog wrapping an arbitrary content window."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from rich import box
from rich.panel import Panel
from rich.text import Text

from eve_tui.actions import ButtonClicked, DismissDialog
from eve_tui.layout import Rect, centered_rect_fixed, split_horizontal, stack_rows
from eve_tui.ui.widgets import Button
from eve_tui.ui.window import Window, WidgetWindow

if TYPE_CHECKING:
    from eve_tui.actions import UiAction
    from eve_tui.events import KeyEvent
    from eve_tui.state import ModelSnapshot
    from eve_tui.ui.frame import Frame

log = logging.getLogger(__name__)

BUTTON_HEIGHT = 3
CANCEL = "Cancel"

ButtonHandler = Callable[[str, WidgetWindow], Optional["UiAction"]]


def ignore_button(name: str, content: WidgetWindow) -> UiAction | None:
    return None


class Dialog(Window):
    """Fixed-size modal frame with a content pane and a column of buttons.

    The dialog registers one ``Button`` per label in the content window, so
    Tab cycles through the content fields and the buttons alike.  Escape and
    Cancel dismiss the dialog; every other button goes to ``on_button``,
    which returns the action to emit (or ``None``).
    """

    def __init__(
        self,
        title: str,
        size: tuple[int, int],
        buttons: Sequence[str],
        content: WidgetWindow,
        focused_button: str | None = None,
        on_button: ButtonHandler = ignore_button,
    ) -> None:
        self.name = title
        self.size = size
        self.buttons = list(buttons)
        self.content = content
        self.on_button = on_button
        self.layout: dict[str, Rect] = {}
        for label in self.buttons:
            content.add_widget(label, Button(label))
        if focused_button is not None:
            content.set_focused(focused_button)

    def do_layout(self, area: Rect) -> bool:
        """Recompute ``frame``/``content``/button rectangles for ``area``.

        Returns False, leaving the layout empty, when the area cannot hold
        the border and the button column.
        """
        self.layout = {}
        dialog_area = centered_rect_fixed(self.size[0], self.size[1], area)
        inner = dialog_area.inner(1)
        button_width = max((len(label) + 2 for label in self.buttons), default=0)
        if inner.is_empty or inner.width <= button_width:
            return False
        content_rect, buttons_rect = split_horizontal(inner, button_width)
        rows = stack_rows(buttons_rect, [BUTTON_HEIGHT] * len(self.buttons))
        self.layout["frame"] = dialog_area
        self.layout["content"] = content_rect
        for label, rect in zip(self.buttons, rows):
            self.layout[label] = rect
        return True

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        if not self.do_layout(area):
            log.debug("dialog %s does not fit in %s, skipped", self.name, area)
            return
        frame_rect = self.layout["frame"]
        frame.clear(frame_rect)
        frame.render(
            Panel(
                Text(""),
                title=f"[bold]{self.name}[/bold]",
                box=box.HEAVY,
                border_style="white" if focused else "dim",
                style="on black",
            ),
            frame_rect,
        )
        for label in self.buttons:
            rect = self.layout[label]
            if not rect.is_empty:
                self.content.widgets[label].render(frame, rect, model, focused)
        self.content.render(frame, self.layout["content"], model, focused)

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        if key.code == "esc":
            log.debug("dismissing dialog %s", self.name)
            return DismissDialog(self.name)

        action = self.content.handle_key_event(key)
        if isinstance(action, ButtonClicked):
            if action.name == CANCEL:
                return DismissDialog(self.name)
            return self.on_button(action.name, self.content)
        return action

    def handle_tick(self) -> UiAction | None:
        return self.content.handle_tick()

    def focus_next(self) -> str | None:
        return self.content.focus_next()

    def focus_prev(self) -> str | None:
        return self.content.focus_prev()

    def get_focused_view(self) -> str | None:
        return self.content.get_focused_view()

    def has_focus(self) -> bool:
        return True

    def set_focus(self) -> None:
        self.content.set_focus()

    def clear_focus(self) -> None:
        self.content.clear_focus()

    def can_focus(self) -> bool:
        return True
