"""Shared text and time formatting helpers for human-facing panels."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

# Go's zero time.Time; pubsub writes it for "never" instead of omitting the field.
GO_ZERO_TIME_PREFIX = "0001-01-01"
FRACTION_RE = re.compile(r"\.(\d+)")

DHCP_LABELS = {
    0: "Noop",
    1: "Static",
    2: "None",
    3: "Deprecated",
    4: "DHCP",
}

KMSG_LEVEL_STYLES = {
    0: "bold red",
    1: "bold red",
    2: "red",
    3: "red",
    4: "yellow",
    5: "cyan",
    6: "default",
    7: "dim",
}


def parse_iso_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value.strip()
    if not text or text.startswith(GO_ZERO_TIME_PREFIX):
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # Go trims trailing zeros and writes nanoseconds; fromisoformat wants six digits
    text = FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def enum_label(value: Any) -> str:
    """Render an enum member by name, an unknown raw integer as ``?(n)``."""
    if isinstance(value, IntEnum):
        return value.name
    if value is None:
        return "-"
    return f"?({value})"


def dhcp_label(value: Any) -> str:
    if value is None:
        return "-"
    return DHCP_LABELS.get(int(value), f"?({int(value)})")


def compact_time(value: datetime | None) -> str:
    if value is None:
        return "never"
    return value.strftime("%Y-%m-%d %H:%M:%S")


def kmsg_timestamp(timestamp_us: int) -> str:
    seconds, micros = divmod(max(0, int(timestamp_us)), 1_000_000)
    return f"[{seconds:>6}.{micros:06d}]"


def kmsg_style(level: int) -> str:
    return KMSG_LEVEL_STYLES.get(level & 7, "default")


def human_bytes(size: int) -> str:
    value = float(max(0, size))
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


def join_or_dash(values) -> str:
    items = [str(v) for v in values or []]
    return ", ".join(items) if items else "-"
