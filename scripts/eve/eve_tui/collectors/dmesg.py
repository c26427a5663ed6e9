"""Kernel log collector reading ``/dev/kmsg`` records."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from eve_tui.messages import DecodeError
from eve_tui.models import DmesgEntry

log = logging.getLogger(__name__)

READ_SIZE = 8192
# priority is facility << 3 | level
LEVEL_MASK = 7


def parse_kmsg_record(line: str) -> DmesgEntry | None:
    """Parse ``"pri,seq,ts_usec,flags[,...];message"``.

    Returns None for the indented ``KEY=value`` continuation lines that
    follow some records.
    """
    if not line or line[0] in " \t":
        return None
    prefix, sep, message = line.partition(";")
    if not sep:
        raise DecodeError(f"kmsg record without ';': {line[:40]!r}")
    fields = prefix.split(",")
    if len(fields) < 3:
        raise DecodeError(f"kmsg record header too short: {prefix!r}")
    try:
        priority, sequence, timestamp_us = (int(value) for value in fields[:3])
    except ValueError:
        raise DecodeError(f"kmsg record header not numeric: {prefix!r}") from None
    return DmesgEntry(
        level=priority & LEVEL_MASK,
        sequence=sequence,
        timestamp_us=timestamp_us,
        message=message.rstrip("\n"),
    )


class KmsgCollector:
    """Non-blocking reader that appends new kernel records to the model.

    ``/dev/kmsg`` hands out one record per read and raises ``EAGAIN`` once
    the buffer is drained; a plain file (used in tests and replays) returns
    several lines per read and an empty read at the end.

    Reads run in a worker thread that outlives the cancelled poll task, so
    reading and ``close()`` share a lock and nothing is read once closed.
    """

    name = "dmesg"

    def __init__(self, path: Path) -> None:
        self.path = path
        self._fd: int | None = None
        self._disabled = False
        self._partial = b""
        self._lock = threading.Lock()

    def _open(self) -> bool:
        if self._fd is not None:
            return True
        if self._disabled:
            return False
        try:
            self._fd = os.open(self.path, os.O_RDONLY | os.O_NONBLOCK)
        except OSError as exc:
            log.warning("dmesg: cannot open %s: %s", self.path, exc)
            self._disabled = True
            return False
        return True

    def read_available(self) -> list[str]:
        with self._lock:
            return self._read_locked()

    def _read_locked(self) -> list[str]:
        if not self._open():
            return []
        lines: list[str] = []
        while True:
            try:
                chunk = os.read(self._fd, READ_SIZE)
            except BlockingIOError:
                break
            except BrokenPipeError:
                # records were overwritten before we read them; the next read resumes
                log.debug("dmesg: ring buffer overrun")
                continue
            if not chunk:
                break
            data = self._partial + chunk
            *complete, self._partial = data.split(b"\n")
            lines.extend(raw.decode("utf-8", errors="replace") for raw in complete)
        return lines

    def poll(self, model) -> bool:
        entries = []
        for line in self.read_available():
            try:
                entry = parse_kmsg_record(line)
            except DecodeError as exc:
                log.debug("dmesg: %s", exc)
                continue
            if entry is not None:
                entries.append(entry)
        if not entries:
            return False
        model.append_dmesg(entries)
        return True

    def close(self) -> None:
        with self._lock:
            self._disabled = True
            if self._fd is not None:
                os.close(self._fd)
                self._fd = None
