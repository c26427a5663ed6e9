"""Tabs, per-tab layer stacks and key/tick routing."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from eve_tui.actions import ButtonClicked, DismissDialog, Quit, Redraw
from eve_tui.events import KeyEvent, Tick
from eve_tui.layout import screen_areas
from eve_tui.panels.header import render_tabs
from eve_tui.ui.dialog import Dialog
from eve_tui.ui.ipdialog import create_ip_dialog
from eve_tui.ui.layer_stack import LayerStack
from eve_tui.ui.pages import ApplicationsPage, DmesgPage, HomePage, NetworkPage, SummaryPage
from eve_tui.ui.statusbar import StatusBar

if TYPE_CHECKING:
    from eve_tui.actions import ActionBus, UiAction
    from eve_tui.events import Event
    from eve_tui.models import NetworkInterface
    from eve_tui.state import ModelSnapshot
    from eve_tui.ui.frame import Frame
    from eve_tui.ui.window import Window

log = logging.getLogger(__name__)

POPPING_BUTTONS = ("Ok", "Cancel")


class UiTabs(enum.IntEnum):
    SUMMARY = 0
    HOME = 1
    NETWORK = 2
    APPLICATIONS = 3
    DMESG = 4

    @property
    def title(self) -> str:
        return self.name.capitalize()

    def previous(self) -> UiTabs:
        return UiTabs(max(self.value - 1, 0))

    def next(self) -> UiTabs:
        return UiTabs(min(self.value + 1, len(UiTabs) - 1))

    @classmethod
    def from_name(cls, name: str) -> UiTabs:
        try:
            return cls[name.upper()]
        except KeyError:
            valid = ", ".join(tab.name.lower() for tab in cls)
            raise ValueError(f"unknown tab {name!r}; expected one of: {valid}") from None


PAGES = {
    UiTabs.SUMMARY: SummaryPage,
    UiTabs.HOME: HomePage,
    UiTabs.NETWORK: NetworkPage,
    UiTabs.APPLICATIONS: ApplicationsPage,
    UiTabs.DMESG: DmesgPage,
}


class Ui:
    """Owns one ``LayerStack`` per tab plus the status bar.

    Key events go to the top layer of the selected tab; the actions it
    returns are either interpreted here (dialog dismissal) or handed back to
    the caller.  Ticks reach every layer of the selected tab and the status
    bar, and whatever they produce is queued on the action bus.
    """

    def __init__(self, action_bus: ActionBus, debug: bool = False, initial_tab: UiTabs = UiTabs.SUMMARY) -> None:
        self.action_bus = action_bus
        self.debug = debug
        self.selected_tab = initial_tab
        self.views: dict[UiTabs, LayerStack] = {tab: LayerStack() for tab in UiTabs}
        self.status_bar = StatusBar(debug=debug)

    def init(self) -> None:
        for tab, page in PAGES.items():
            self.views[tab].push(page())

    @property
    def active_view(self) -> LayerStack:
        return self.views[self.selected_tab]

    def push_layer(self, window: Window) -> None:
        log.debug("push %s on %s", window.name, self.selected_tab.title)
        self.active_view.push(window)

    def pop_layer(self) -> Window | None:
        # the page at the bottom of each tab stays
        if len(self.active_view) <= 1:
            return None
        window = self.active_view.pop()
        log.debug("pop %s from %s", window.name if window else None, self.selected_tab.title)
        return window

    def show_ip_dialog(self, iface: NetworkInterface) -> Dialog:
        dialog = create_ip_dialog(iface)
        self.push_layer(dialog)
        return dialog

    def notify(self, text: str) -> None:
        self.status_bar.notify(text)

    def render(self, frame: Frame, model: ModelSnapshot) -> None:
        tabs_rect, body_rect, status_rect = screen_areas(frame.area)
        frame.render(render_tabs([tab.title for tab in UiTabs], self.selected_tab.value), tabs_rect)
        self.active_view.render(frame, body_rect, model)
        self.status_bar.render(frame, status_rect, model, False)

    def handle_event(self, event: Event) -> UiAction | None:
        if isinstance(event, KeyEvent):
            return self.handle_key_event(event)
        if isinstance(event, Tick):
            self.handle_tick()
            return None
        raise TypeError(f"unknown event: {event!r}")

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        if self.debug and self._handle_debug_key(key):
            return None

        action = self.active_view.handle_key_event(key)
        result = self._interpret(action)

        if key.is_ctrl("left"):
            self._select_tab(self.selected_tab.previous())
        elif key.is_ctrl("right"):
            self._select_tab(self.selected_tab.next())
        return result

    def _handle_debug_key(self, key: KeyEvent) -> bool:
        if key.is_ctrl("e"):
            self.action_bus.send(Quit())
        elif key.is_ctrl("r"):
            self.action_bus.send(Redraw())
        elif key.is_ctrl("p"):
            self.pop_layer()
            self.action_bus.send(Redraw())
        elif key.is_ctrl("a"):
            raise RuntimeError("crash requested from the keyboard")
        else:
            return False
        return True

    def _interpret(self, action: UiAction | None) -> UiAction | None:
        if action is None:
            return None
        if isinstance(action, DismissDialog):
            self.pop_layer()
            self.action_bus.send(Redraw())
            return None
        if isinstance(action, ButtonClicked):
            if action.name in POPPING_BUTTONS:
                self.pop_layer()
                self.action_bus.send(Redraw())
            else:
                log.debug("unhandled button %s", action.name)
            return None
        return action

    def _select_tab(self, tab: UiTabs) -> None:
        if tab != self.selected_tab:
            log.debug("tab %s -> %s", self.selected_tab.title, tab.title)
            self.selected_tab = tab
            self.action_bus.send(Redraw())

    def handle_tick(self) -> None:
        for action in self.active_view.handle_tick():
            self.action_bus.send(action)
        action = self.status_bar.handle_tick()
        if action is not None:
            self.action_bus.send(action)
