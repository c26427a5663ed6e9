"""Rectangle geometry and responsive layout selection."""

from __future__ import annotations

from dataclasses import dataclass

TABS_HEIGHT = 3
STATUS_BAR_HEIGHT = 3


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersection(self, other: Rect) -> Rect:
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(x, y, max(0, right - x), max(0, bottom - y))

    def inner(self, margin: int) -> Rect:
        return Rect(
            self.x + margin,
            self.y + margin,
            max(0, self.width - 2 * margin),
            max(0, self.height - 2 * margin),
        )


def select_layout_mode(width: int) -> str:
    if width < 100:
        return "narrow"
    if width < 160:
        return "medium"
    return "wide"


def centered_rect_fixed(width: int, height: int, area: Rect) -> Rect:
    """A ``width`` x ``height`` rectangle centered in ``area``, clamped to it."""
    width = min(width, area.width)
    height = min(height, area.height)
    x = area.x + (area.width - width) // 2
    y = area.y + (area.height - height) // 2
    return Rect(x, y, width, height)


def split_horizontal(area: Rect, fixed_right: int) -> tuple[Rect, Rect]:
    """Split into a flexible left pane and a ``fixed_right`` wide right pane."""
    right_width = min(max(0, fixed_right), area.width)
    left = Rect(area.x, area.y, area.width - right_width, area.height)
    right = Rect(area.x + left.width, area.y, right_width, area.height)
    return left, right


def split_columns(area: Rect, count: int) -> list[Rect]:
    if count <= 0:
        return []
    base, extra = divmod(area.width, count)
    columns = []
    x = area.x
    for index in range(count):
        width = base + (1 if index < extra else 0)
        columns.append(Rect(x, area.y, width, area.height))
        x += width
    return columns


def stack_rows(area: Rect, heights: list[int]) -> list[Rect]:
    """Top-aligned fixed-height rows; rows past the bottom come back empty."""
    rows = []
    y = area.y
    for height in heights:
        visible = max(0, min(height, area.bottom - y))
        rows.append(Rect(area.x, y, area.width, visible))
        y += height
    return rows


def screen_areas(area: Rect) -> tuple[Rect, Rect, Rect]:
    """Split the terminal into tab bar, body and status bar."""
    tabs_height = min(TABS_HEIGHT, area.height)
    status_height = min(STATUS_BAR_HEIGHT, max(0, area.height - tabs_height))
    body_height = max(0, area.height - tabs_height - status_height)
    tabs = Rect(area.x, area.y, area.width, tabs_height)
    body = Rect(area.x, tabs.bottom, area.width, body_height)
    status = Rect(area.x, body.bottom, area.width, status_height)
    return tabs, body, status
