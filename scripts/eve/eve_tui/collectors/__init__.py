"""Collector helpers and package exports."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any:
    return json.loads(path.read_text())


def env_run_dir() -> Path:
    return Path(os.environ.get("EVE_RUN_DIR", "/run"))


def resolve_pattern(run_dir: Path, pattern: str) -> list[Path]:
    """Expand a topic glob; relative patterns are taken under ``run_dir``."""
    path = Path(pattern)
    if path.is_absolute():
        base, relative = Path(path.anchor), str(path.relative_to(path.anchor))
    else:
        base, relative = run_dir, pattern
    try:
        return sorted(p for p in base.glob(relative) if p.is_file())
    except OSError:
        return []


class FileWatcher:
    """Remembers file mtimes between scans of one topic pattern."""

    def __init__(self, run_dir: Path, pattern: str) -> None:
        self.run_dir = run_dir
        self.pattern = pattern
        self._mtimes: dict[Path, int] = {}

    def scan(self) -> tuple[list[Path], list[Path]]:
        """Return ``(changed, removed)`` since the previous scan.

        Changed files come back oldest first, so applying them in order
        leaves the newest one in effect.
        """
        current: dict[Path, int] = {}
        for path in resolve_pattern(self.run_dir, self.pattern):
            try:
                current[path] = path.stat().st_mtime_ns
            except OSError:
                continue
        changed = sorted(
            (path for path, mtime in current.items() if self._mtimes.get(path) != mtime),
            key=lambda path: (current[path], str(path)),
        )
        removed = [path for path in self._mtimes if path not in current]
        self._mtimes = current
        return changed, removed
