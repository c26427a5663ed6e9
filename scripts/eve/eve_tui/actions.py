"""UI actions and the bus that carries them to the top-level loop."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterable, Union

from eve_tui.models import InterfaceConfig


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Redraw:
    pass


@dataclass(frozen=True)
class DismissDialog:
    source: str = ""


@dataclass(frozen=True)
class ButtonClicked:
    name: str


@dataclass(frozen=True)
class EditInterface:
    name: str


@dataclass(frozen=True)
class InterfaceConfigRequested:
    interface: str
    config: InterfaceConfig


@dataclass(frozen=True)
class Notify:
    text: str


UiAction = Union[
    Quit,
    Redraw,
    DismissDialog,
    ButtonClicked,
    EditInterface,
    InterfaceConfigRequested,
    Notify,
]


class ActionBus:
    """Unbounded action channel; ``send`` never blocks or fails."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[UiAction] = asyncio.Queue()

    def __len__(self) -> int:
        return self._queue.qsize()

    def send(self, action: UiAction) -> None:
        self._queue.put_nowait(action)

    def drain(self) -> list[UiAction]:
        """Take the actions queued so far; later sends wait for the next drain."""
        pending = self._queue.qsize()
        return [self._queue.get_nowait() for _ in range(pending)]

    async def receive(self) -> UiAction:
        return await self._queue.get()


def coalesce_redraws(actions: Iterable[UiAction]) -> tuple[bool, list[UiAction]]:
    """Collapse any number of ``Redraw`` into one flag, keep the rest in order."""
    redraw = False
    rest: list[UiAction] = []
    for action in actions:
        if isinstance(action, Redraw):
            redraw = True
        else:
            rest.append(action)
    return redraw, rest
