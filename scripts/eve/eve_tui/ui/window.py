"""Window capabilities.

A window is whatever combination of the capability mixins below it needs.
Every capability has a no-op default, so the layer stack can dispatch to any
window uniformly while a concrete page overrides only what it uses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eve_tui.events import Event, KeyEvent, Tick
from eve_tui.ui.focus import FocusTracker

if TYPE_CHECKING:
    from eve_tui.actions import UiAction
    from eve_tui.layout import Rect
    from eve_tui.state import ModelSnapshot
    from eve_tui.ui.frame import Frame


class Presenter:
    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        pass


class EventHandler:
    def handle_event(self, event: Event) -> UiAction | None:
        if isinstance(event, KeyEvent):
            return self.handle_key_event(event)
        if isinstance(event, Tick):
            return self.handle_tick()
        raise TypeError(f"unknown event: {event!r}")

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        return None

    def handle_tick(self) -> UiAction | None:
        return None


class FocusTracking:
    def focus_next(self) -> str | None:
        return None

    def focus_prev(self) -> str | None:
        return None

    def get_focused_view(self) -> str | None:
        return None


class FocusAcceptor:
    def has_focus(self) -> bool:
        return False

    def set_focus(self) -> None:
        pass

    def clear_focus(self) -> None:
        pass

    def can_focus(self) -> bool:
        return False


class Visible:
    def is_visible(self) -> bool:
        return True


class Window(Presenter, EventHandler, FocusTracking, FocusAcceptor, Visible):
    name = "window"


class Widget(Presenter, EventHandler, FocusAcceptor):
    """A focusable element owned by a ``WidgetWindow``."""

    def __init__(self) -> None:
        self._focused = False

    def has_focus(self) -> bool:
        return self._focused

    def set_focus(self) -> None:
        self._focused = True

    def clear_focus(self) -> None:
        self._focused = False

    def can_focus(self) -> bool:
        return True


class WidgetWindow(Window):
    """Window composed of named widgets; Tab and Shift+Tab move focus."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.widgets: dict[str, Widget] = {}
        self.focus = FocusTracker()

    def add_widget(self, widget_id: str, widget: Widget) -> None:
        self.widgets[widget_id] = widget
        self.focus.add(widget_id)

    def focused_widget(self) -> Widget | None:
        widget_id = self.focus.get_focused_view()
        return self.widgets.get(widget_id) if widget_id is not None else None

    def set_focused(self, widget_id: str) -> bool:
        widget = self.widgets.get(widget_id)
        if widget is None or not widget.can_focus():
            return False
        self._move_focus(lambda: widget_id if self.focus.set_focus(widget_id) else None)
        return True

    def _move_focus(self, step) -> str | None:
        previous_id = self.focus.get_focused_view()
        previous = self.focused_widget()
        # skip widgets that currently refuse focus, at most one full cycle
        target = None
        for _ in range(max(1, len(self.focus))):
            target = step()
            if target is None or self.widgets[target].can_focus():
                break
            target = None
        if target is None:
            if previous_id is not None:
                self.focus.set_focus(previous_id)
            else:
                self.focus.clear()
            return None
        if previous is not None:
            previous.clear_focus()
        self.widgets[target].set_focus()
        return target

    def focus_next(self) -> str | None:
        return self._move_focus(self.focus.focus_next)

    def focus_prev(self) -> str | None:
        return self._move_focus(self.focus.focus_prev)

    def get_focused_view(self) -> str | None:
        return self.focus.get_focused_view()

    def has_focus(self) -> bool:
        return self.focused_widget() is not None

    def can_focus(self) -> bool:
        return any(widget.can_focus() for widget in self.widgets.values())

    def set_focus(self) -> None:
        if self.focused_widget() is None:
            self.focus_next()

    def clear_focus(self) -> None:
        widget = self.focused_widget()
        if widget is not None:
            widget.clear_focus()
        self.focus.clear()

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        if key.code == "tab" and not key.modifiers:
            self.focus_next()
            return None
        if key.code == "backtab":
            self.focus_prev()
            return None
        widget = self.focused_widget()
        if widget is None:
            return None
        return widget.handle_key_event(key)

    def handle_tick(self) -> UiAction | None:
        for widget in self.widgets.values():
            action = widget.handle_tick()
            if action is not None:
                return action
        return None
