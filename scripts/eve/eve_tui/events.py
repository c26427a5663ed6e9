"""Input events and the merged key/tick event source."""

from __future__ import annotations

import asyncio
import codecs
import enum
import logging
import os
import re
from dataclasses import dataclass
from typing import Union

log = logging.getLogger(__name__)


class KeyModifiers(enum.IntFlag):
    NONE = 0
    SHIFT = 1
    ALT = 2
    CONTROL = 4


@dataclass(frozen=True)
class KeyEvent:
    code: str
    modifiers: KeyModifiers = KeyModifiers.NONE

    def is_ctrl(self, code: str) -> bool:
        return self.code == code and self.modifiers == KeyModifiers.CONTROL

    def is_plain(self, code: str) -> bool:
        return self.code == code and not self.modifiers & (KeyModifiers.CONTROL | KeyModifiers.ALT)


@dataclass(frozen=True)
class Tick:
    pass


TICK = Tick()
Event = Union[KeyEvent, Tick]

CSI_RE = re.compile(r"\x1b\[(?:(\d+)(?:;(\d+))?)?([A-Za-z~])")
SS3_RE = re.compile(r"\x1bO([A-DHF])")
# an escape sequence cut off by the end of a read
INCOMPLETE_ESCAPE_RE = re.compile(r"\x1b(?:\[[\d;]*|O)?\Z")
# how long a trailing Esc waits for the rest of its sequence
ESC_TIMEOUT = 0.05

CSI_FINAL_KEYS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "Z": "backtab",
}

CSI_TILDE_KEYS = {
    "1": "home",
    "2": "insert",
    "3": "delete",
    "4": "end",
    "5": "pageup",
    "6": "pagedown",
}


def _csi_modifiers(param: str | None) -> KeyModifiers:
    # xterm encodes modifiers as 1 + (shift | alt << 1 | ctrl << 2)
    if not param:
        return KeyModifiers.NONE
    bits = max(0, int(param) - 1)
    return KeyModifiers(bits & 7)


def _decode_escape(text: str, pos: int) -> tuple[KeyEvent, int]:
    match = CSI_RE.match(text, pos)
    if match:
        first, second, final = match.groups()
        if final == "~":
            code = CSI_TILDE_KEYS.get(first or "", "unknown")
            modifiers = _csi_modifiers(second)
        else:
            code = CSI_FINAL_KEYS.get(final, "unknown")
            modifiers = _csi_modifiers(second)
            if final == "Z":
                modifiers |= KeyModifiers.SHIFT
        return KeyEvent(code, modifiers), match.end()
    match = SS3_RE.match(text, pos)
    if match:
        return KeyEvent(CSI_FINAL_KEYS[match.group(1)]), match.end()
    if pos + 1 < len(text) and text[pos + 1] != "\x1b":
        nested = decode_keys(text[pos + 1])
        if nested:
            key = nested[0]
            return KeyEvent(key.code, key.modifiers | KeyModifiers.ALT), pos + 2
    return KeyEvent("esc"), pos + 1


def decode_keys(text: str) -> list[KeyEvent]:
    """Decode one chunk read from a non-canonical terminal into key events."""
    keys: list[KeyEvent] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch == "\x1b":
            key, pos = _decode_escape(text, pos)
            keys.append(key)
            continue
        pos += 1
        if ch in ("\r", "\n"):
            keys.append(KeyEvent("enter"))
        elif ch == "\t":
            keys.append(KeyEvent("tab"))
        elif ch in ("\x7f", "\x08"):
            keys.append(KeyEvent("backspace"))
        elif ch == "\x00":
            keys.append(KeyEvent(" ", KeyModifiers.CONTROL))
        elif ord(ch) < 32:
            keys.append(KeyEvent(chr(ord(ch) + 96), KeyModifiers.CONTROL))
        else:
            keys.append(KeyEvent(ch))
    return keys


def split_incomplete_escape(text: str) -> tuple[str, str]:
    """Split ``text`` into what can be decoded now and a trailing partial sequence."""
    match = INCOMPLETE_ESCAPE_RE.search(text)
    if match is None:
        return text, ""
    return text[: match.start()], text[match.start() :]


class EventSource:
    """Merges stdin key presses and periodic ticks into one queue.

    At most one tick is queued at a time, so a slow frame does not leave a
    backlog of ticks behind it.
    """

    def __init__(self, tick_interval: float, stdin_fd: int | None = None) -> None:
        self.tick_interval = tick_interval
        self._stdin_fd = stdin_fd
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._tick_pending = False
        self._ticker: asyncio.Task | None = None
        self._reading = False
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""
        self._flush_handle: asyncio.TimerHandle | None = None

    def start(self) -> None:
        loop = asyncio.get_running_loop()
        if self._stdin_fd is not None:
            loop.add_reader(self._stdin_fd, self._on_stdin)
            self._reading = True
        self._ticker = loop.create_task(self._tick_loop(), name="eve-tui-ticker")

    def close(self) -> None:
        if self._reading and self._stdin_fd is not None:
            asyncio.get_running_loop().remove_reader(self._stdin_fd)
            self._reading = False
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None

    def push(self, event: Event) -> None:
        if isinstance(event, Tick):
            if self._tick_pending:
                return
            self._tick_pending = True
        self._queue.put_nowait(event)

    async def next(self) -> Event:
        event = await self._queue.get()
        if isinstance(event, Tick):
            self._tick_pending = False
        return event

    def _on_stdin(self) -> None:
        try:
            data = os.read(self._stdin_fd, 1024)
        except BlockingIOError:
            return
        self.feed(data)

    def feed(self, data: bytes) -> None:
        """Decode raw stdin bytes, holding back a sequence cut off at the end.

        Multi-byte characters and escape sequences may arrive over two reads.
        A held-back Esc is released as a key of its own if nothing follows
        within ``ESC_TIMEOUT``.
        """
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
        text, self._pending = split_incomplete_escape(self._pending + self._decoder.decode(data))
        for key in decode_keys(text):
            self.push(key)
        if self._pending:
            self._flush_handle = asyncio.get_running_loop().call_later(ESC_TIMEOUT, self.flush_pending)

    def flush_pending(self) -> None:
        self._flush_handle = None
        pending, self._pending = self._pending, ""
        for key in decode_keys(pending):
            self.push(key)

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self.push(TICK)
