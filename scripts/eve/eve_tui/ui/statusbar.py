"""Bottom status bar: wall clock and transient notices."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Callable

from eve_tui.actions import Redraw
from eve_tui.panels.header import render_status_bar
from eve_tui.ui.window import Window

if TYPE_CHECKING:
    from eve_tui.actions import UiAction
    from eve_tui.layout import Rect
    from eve_tui.state import ModelSnapshot
    from eve_tui.ui.frame import Frame

NOTICE_TICKS = 20


class StatusBar(Window):
    name = "statusbar"

    def __init__(self, debug: bool = False, clock: Callable[[], datetime] = datetime.now) -> None:
        self.debug = debug
        self.clock = clock
        self.now: datetime | None = None
        self.notice = ""
        self._notice_ticks = 0

    def notify(self, text: str, ticks: int = NOTICE_TICKS) -> None:
        self.notice = text
        self._notice_ticks = ticks

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        frame.render(render_status_bar(self.now, self.notice, self.debug), area)

    def handle_tick(self) -> UiAction | None:
        changed = False
        if self._notice_ticks > 0:
            self._notice_ticks -= 1
            if self._notice_ticks == 0:
                self.notice = ""
                changed = True
        now = self.clock().replace(microsecond=0)
        if now != self.now:
            self.now = now
            changed = True
        return Redraw() if changed else None
