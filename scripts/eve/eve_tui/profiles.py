"""Profile resolution and user config merging for the dashboard."""

from __future__ import annotations

import json
from pathlib import Path

from eve_tui.collectors.topics import DEFAULT_TOPICS

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
TAB_NAMES = ("summary", "home", "network", "applications", "dmesg")
MIN_TICK_MS = 50

BUILTIN_PROFILES: dict[str, dict] = {
    "release": {
        "tick_ms": 250,
        "debug": False,
        "log_level": "INFO",
        "log_dir": "/persist/log/eve-tui",
        "start_tab": "summary",
        "topics": {},
    },
    "debug": {
        "tick_ms": 250,
        "debug": True,
        "log_level": "DEBUG",
        "log_dir": "/tmp/eve-tui",
        "start_tab": "summary",
        "topics": {},
    },
}


def load_user_config(path: str | None) -> dict:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"config path not found: {config_path}")

    try:
        config = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON config: {exc}") from exc
    if not isinstance(config, dict):
        raise ValueError("config must be a JSON object")
    return config


def resolve_profile(profile: str, config_path: str | None = None) -> dict:
    if profile not in BUILTIN_PROFILES:
        raise ValueError(f"unknown profile: {profile}")

    user_config = load_user_config(config_path)

    selected_profile = user_config.get("profile")
    if selected_profile:
        if selected_profile not in BUILTIN_PROFILES:
            raise ValueError(f"unknown profile in config: {selected_profile}")
        profile = selected_profile
    resolved = dict(BUILTIN_PROFILES[profile])

    if "tick_ms" in user_config:
        try:
            value = int(user_config["tick_ms"])
        except (TypeError, ValueError):
            raise ValueError(f"tick_ms must be an integer: {user_config['tick_ms']!r}") from None
        resolved["tick_ms"] = max(MIN_TICK_MS, value)

    if "log_level" in user_config:
        level = str(user_config["log_level"]).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log_level: {user_config['log_level']}")
        resolved["log_level"] = level

    if "log_dir" in user_config:
        resolved["log_dir"] = str(user_config["log_dir"])

    if "start_tab" in user_config:
        tab = str(user_config["start_tab"]).lower()
        if tab not in TAB_NAMES:
            raise ValueError(f"unknown start_tab: {user_config['start_tab']}")
        resolved["start_tab"] = tab

    topic_config = user_config.get("topics")
    if topic_config is not None:
        if not isinstance(topic_config, dict):
            raise ValueError("topics must map topic names to path patterns")
        unknown = sorted(set(topic_config) - set(DEFAULT_TOPICS))
        if unknown:
            raise ValueError(f"unknown topics in config: {', '.join(unknown)}")
        resolved["topics"] = {name: str(pattern) for name, pattern in topic_config.items()}

    resolved["name"] = profile
    return resolved
