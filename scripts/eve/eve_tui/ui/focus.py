"""Cyclic focus navigation over a window's named children."""

from __future__ import annotations


class FocusTracker:
    def __init__(self, view_ids=()) -> None:
        self._ids: list[str] = []
        self._index: int | None = None
        for view_id in view_ids:
            self.add(view_id)

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, view_id: str) -> None:
        if view_id not in self._ids:
            self._ids.append(view_id)

    def remove(self, view_id: str) -> None:
        if view_id not in self._ids:
            return
        focused = self.get_focused_view()
        self._ids.remove(view_id)
        if focused == view_id or not self._ids:
            self._index = None
        else:
            self._index = self._ids.index(focused) if focused is not None else None

    def set_focus(self, view_id: str) -> bool:
        if view_id not in self._ids:
            return False
        self._index = self._ids.index(view_id)
        return True

    def clear(self) -> None:
        self._index = None

    def focus_next(self) -> str | None:
        if not self._ids:
            return None
        self._index = 0 if self._index is None else (self._index + 1) % len(self._ids)
        return self._ids[self._index]

    def focus_prev(self) -> str | None:
        if not self._ids:
            return None
        if self._index is None:
            self._index = len(self._ids) - 1
        else:
            self._index = (self._index - 1) % len(self._ids)
        return self._ids[self._index]

    def get_focused_view(self) -> str | None:
        if self._index is None:
            return None
        return self._ids[self._index]
