"""Top-level pages, one at the bottom of each tab's layer stack."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Group

from eve_tui.actions import EditInterface
from eve_tui.layout import Rect, select_layout_mode, split_columns, stack_rows
from eve_tui.panels.apps import render_app_summary, render_apps
from eve_tui.panels.dmesg import render_dmesg
from eve_tui.panels.downloader import render_downloader
from eve_tui.panels.network import (
    render_interface_detail,
    render_interfaces,
    render_management_summary,
)
from eve_tui.panels.node import render_node, render_onboarding_banner, render_vault
from eve_tui.ui.window import Window

if TYPE_CHECKING:
    from eve_tui.actions import UiAction
    from eve_tui.events import KeyEvent
    from eve_tui.state import ModelSnapshot
    from eve_tui.ui.frame import Frame

SCROLL_PAGE = 10


class SummaryPage(Window):
    name = "summary"

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        panels = [
            render_node(model.node_status),
            render_vault(model.vault_status),
            render_app_summary(model.node_status.app_summary),
            render_downloader(model.downloader),
        ]
        if select_layout_mode(area.width) == "narrow":
            frame.render(Group(*panels), area)
            return
        top, bottom = stack_rows(area, [area.height // 2, area.height - area.height // 2])
        for panel, rect in zip(panels, split_columns(top, 2) + split_columns(bottom, 2)):
            frame.render(panel, rect)


class HomePage(Window):
    name = "home"

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        banner, body = stack_rows(area, [1, max(0, area.height - 1)])
        frame.render(render_onboarding_banner(model.node_status), banner)
        left, right = split_columns(body, 2)
        frame.render(render_management_summary(model.network), left)
        frame.render(render_apps(model.apps, limit=max(0, right.height - 3)), right)


class NetworkPage(Window):
    """Interface list with a cursor; Enter opens the IP configuration dialog."""

    name = "network"

    def __init__(self) -> None:
        self.selected = 0
        self._names: list[str] = []

    def selected_name(self) -> str | None:
        if not self._names:
            return None
        return self._names[min(self.selected, len(self._names) - 1)]

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        self._names = [iface.name for iface in model.network]
        if self._names:
            self.selected = min(self.selected, len(self._names) - 1)
        list_height = min(area.height, len(self._names) + 4)
        top, bottom = stack_rows(area, [list_height, max(0, area.height - list_height)])
        frame.render(render_interfaces(model.network, self.selected if focused else None), top)
        name = self.selected_name()
        frame.render(render_interface_detail(model.interface(name) if name else None), bottom)

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        if key.is_plain("up"):
            self.selected = max(0, self.selected - 1)
        elif key.is_plain("down"):
            self.selected = min(max(0, len(self._names) - 1), self.selected + 1)
        elif key.is_plain("enter"):
            name = self.selected_name()
            if name is not None:
                return EditInterface(name)
        return None


class ApplicationsPage(Window):
    name = "applications"

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        frame.render(render_apps(model.apps), area)


class DmesgPage(Window):
    """Kernel log tail; Up/Down/PageUp/PageDown scroll, End follows again."""

    name = "dmesg"

    def __init__(self) -> None:
        self.scroll = 0
        self._available = 0

    def render(self, frame: Frame, area: Rect, model: ModelSnapshot, focused: bool) -> None:
        self._available = len(model.dmesg)
        self.scroll = min(self.scroll, max(0, self._available - 1))
        frame.render(render_dmesg(model.dmesg, area.height, self.scroll), area)

    def handle_key_event(self, key: KeyEvent) -> UiAction | None:
        if key.is_plain("up"):
            self.scroll += 1
        elif key.is_plain("down"):
            self.scroll = max(0, self.scroll - 1)
        elif key.is_plain("pageup"):
            self.scroll += SCROLL_PAGE
        elif key.is_plain("pagedown"):
            self.scroll = max(0, self.scroll - SCROLL_PAGE)
        elif key.is_plain("end"):
            self.scroll = 0
        elif key.is_plain("home"):
            self.scroll = max(0, self._available - 1)
        return None
