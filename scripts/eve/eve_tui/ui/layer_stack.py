"""Per-tab stack of windows; the last pushed window is the active one."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from eve_tui.events import TICK

if TYPE_CHECKING:
    from eve_tui.actions import UiAction
    from eve_tui.events import KeyEvent
    from eve_tui.layout import Rect
    from eve_tui.state import ModelSnapshot
    from eve_tui.ui.frame import Frame
    from eve_tui.ui.window import Window


class LayerStack:
    def __init__(self) -> None:
        self._layers: list[Window] = []

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Window]:
        return iter(self._layers)

    def push(self, window: Window) -> None:
        self._layers.append(window)

    def pop(self) -> Window | None:
        if not self._layers:
            return None
        return self._layers.pop()

    def last(self) -> Window | None:
        return self._layers[-1] if self._layers else None

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot) -> None:
        top = len(self._layers) - 1
        for index, layer in enumerate(self._layers):
            if layer.is_visible():
                layer.render(frame, area, model, index == top)

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        top = self.last()
        if top is None:
            return None
        return top.handle_event(key)

    def handle_tick(self) -> list[UiAction]:
        """Tick every layer bottom-to-top, the same order they are painted in."""
        actions = []
        for layer in list(self._layers):
            action = layer.handle_event(TICK)
            if action is not None:
                actions.append(action)
        return actions
