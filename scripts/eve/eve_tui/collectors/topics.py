"""Status topics and the tasks that poll them into the model."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable

from eve_tui.actions import ActionBus, Redraw
from eve_tui.collectors import FileWatcher, read_json
from eve_tui.collectors.dmesg import KmsgCollector
from eve_tui.messages import (
    decode_app_summary,
    decode_device_network_status,
    decode_downloader_status,
    decode_node_status,
    decode_onboarding_status,
    decode_vault_status,
)
from eve_tui.state import Model

log = logging.getLogger(__name__)

DEFAULT_TOPICS: dict[str, str] = {
    "network": "nim/DeviceNetworkStatus/global.json",
    "apps": "zedmanager/AppInstanceStatus/*.json",
    "vault": "vaultmgr/VaultStatus/*.json",
    "downloader": "downloader/DownloaderStatus/*.json",
    "node": "monitor/NodeStatus/global.json",
    "summary": "zedmanager/AppInstanceSummary/global.json",
    "onboarding": "zedclient/OnboardingStatus/global.json",
    "dmesg": "/dev/kmsg",
}


class TopicCollector:
    """Decodes changed checkpoint files of one topic and applies them.

    Files that fail to read or decode are logged and skipped; the model keeps
    whatever it had from the last good message.
    """

    def __init__(
        self,
        name: str,
        run_dir: Path,
        pattern: str,
        decode: Callable[[Any], Any],
        apply: Callable[[Model, Any], None],
    ) -> None:
        self.name = name
        self.decode = decode
        self.apply = apply
        self.watcher = FileWatcher(run_dir, pattern)

    def load(self, path: Path) -> Any:
        try:
            return self.decode(read_json(path))
        except (OSError, ValueError) as exc:
            log.warning("%s: dropping %s: %s", self.name, path, exc)
            return None

    def handle_removed(self, model: Model, removed: list[Path]) -> bool:
        log.debug("%s: %d file(s) removed", self.name, len(removed))
        return False

    def poll(self, model: Model) -> bool:
        """Apply every changed file; True when the model was updated."""
        changed, removed = self.watcher.scan()
        updated = False
        for path in changed:
            message = self.load(path)
            if message is None:
                continue
            self.apply(model, message)
            updated = True
        if removed:
            updated = self.handle_removed(model, removed) or updated
        return updated


def build_collectors(run_dir: Path, overrides: dict[str, str] | None = None) -> list:
    # apps.py subclasses TopicCollector, so it cannot be imported at module level
    from eve_tui.collectors.apps import AppStatusCollector

    patterns = dict(DEFAULT_TOPICS)
    for name, pattern in (overrides or {}).items():
        if name not in DEFAULT_TOPICS:
            raise ValueError(f"unknown topic in config: {name}")
        patterns[name] = pattern

    return [
        TopicCollector("node", run_dir, patterns["node"], decode_node_status, Model.update_node_status),
        TopicCollector(
            "onboarding", run_dir, patterns["onboarding"], decode_onboarding_status, Model.update_onboarding_status
        ),
        TopicCollector("summary", run_dir, patterns["summary"], decode_app_summary, Model.update_app_summary),
        TopicCollector(
            "network", run_dir, patterns["network"], decode_device_network_status, Model.update_network_status
        ),
        TopicCollector("vault", run_dir, patterns["vault"], decode_vault_status, Model.update_vault_status),
        TopicCollector(
            "downloader", run_dir, patterns["downloader"], decode_downloader_status, Model.update_downloader_status
        ),
        AppStatusCollector(run_dir, patterns["apps"]),
        KmsgCollector(run_dir / patterns["dmesg"]),
    ]


def collect_once(collectors: list, model: Model) -> int:
    """Poll every collector once in the calling thread; returns how many updated."""
    return sum(1 for collector in collectors if collector.poll(model))


async def run_collector(collector, model: Model, bus: ActionBus, interval: float) -> None:
    log.info("collector %s started", collector.name)
    try:
        while True:
            # file reads stay off the render loop; the model is lock-guarded
            if await asyncio.to_thread(collector.poll, model):
                bus.send(Redraw())
            await asyncio.sleep(interval)
    finally:
        log.info("collector %s stopped", collector.name)


def start_collectors(collectors: list, model: Model, bus: ActionBus, interval: float) -> list[asyncio.Task]:
    return [
        asyncio.create_task(run_collector(collector, model, bus, interval), name=f"collector-{collector.name}")
        for collector in collectors
    ]
