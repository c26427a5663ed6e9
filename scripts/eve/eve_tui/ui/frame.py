"""Cell buffer that windows paint rich renderables into.

Later paints overwrite earlier ones cell by cell, which is what lets a dialog
sit on top of the page underneath it.  The frame itself is a rich renderable
and is handed to ``rich.live.Live`` once fully painted.
"""

from __future__ import annotations

from typing import Optional

from rich.cells import cell_len
from rich.console import Console, ConsoleOptions, RenderableType, RenderResult
from rich.segment import Segment
from rich.style import Style

from eve_tui.layout import Rect

Cell = tuple[str, Optional[Style]]
BLANK: Cell = (" ", None)
# second half of a double-width character
CONTINUATION: Cell = ("", None)


def _split_wide(row: list[Cell], start: int, end: int) -> None:
    """Blank the half of any double-width character cut by ``[start, end)``.

    A row must always add up to its width, so a wide character that is only
    partly overwritten cannot keep its other half.
    """
    if 0 < start < len(row) and row[start] == CONTINUATION:
        row[start - 1] = BLANK
    if end < len(row) and row[end] == CONTINUATION:
        row[end] = BLANK


class Frame:
    def __init__(self, console: Console, width: int, height: int) -> None:
        self.console = console
        self.area = Rect(0, 0, max(0, width), max(0, height))
        self._cells: list[list[Cell]] = [[BLANK] * self.area.width for _ in range(self.area.height)]

    def clear(self, area: Rect) -> None:
        area = area.intersection(self.area)
        for y in range(area.y, area.bottom):
            row = self._cells[y]
            _split_wide(row, area.x, area.right)
            row[area.x : area.right] = [BLANK] * area.width

    def render(self, renderable: RenderableType, area: Rect) -> None:
        area = area.intersection(self.area)
        if area.is_empty:
            return
        options = self.console.options.update_dimensions(area.width, area.height)
        lines = self.console.render_lines(renderable, options, pad=True)
        for offset, line in enumerate(lines[: area.height]):
            self._blit(area.y + offset, area.x, area.right, line)

    def _blit(self, y: int, x: int, right: int, line: list[Segment]) -> None:
        row = self._cells[y]
        col = x
        for segment in line:
            if segment.control:
                continue
            for char in segment.text:
                width = cell_len(char)
                if width == 0:
                    continue
                if col + width > right:
                    return
                _split_wide(row, col, col + width)
                row[col] = (char, segment.style)
                if width == 2:
                    row[col + 1] = CONTINUATION
                col += width

    def row_text(self, y: int) -> str:
        return "".join(char for char, _ in self._cells[y])

    def text(self) -> str:
        return "\n".join(self.row_text(y) for y in range(self.area.height))

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        for row in self._cells:
            run: list[str] = []
            run_style: Optional[Style] = None
            for char, style in row:
                if not char:
                    continue
                if style != run_style and run:
                    yield Segment("".join(run), run_style)
                    run = []
                run_style = style
                run.append(char)
            if run:
                yield Segment("".join(run), run_style)
            yield Segment.line()
