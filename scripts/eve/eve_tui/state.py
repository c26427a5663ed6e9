"""Device-state owner shared by the render loop and the ingestion tasks."""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping
from uuid import UUID

from eve_tui import reducers
from eve_tui.messages import (
    AppInstanceStatus,
    AppInstanceSummaryMessage,
    AppsList,
    DeviceNetworkStatus,
    DownloaderStatus,
    EveNodeStatus,
    EveOnboardingStatus,
    EveVaultStatus,
)
from eve_tui.models import (
    AppInstance,
    DmesgEntry,
    NetworkInterface,
    NodeStatus,
    VaultStatus,
    VaultUnknown,
)

log = logging.getLogger(__name__)


def _tagged(value: Any) -> dict[str, Any]:
    return {"kind": type(value).__name__, **asdict(value)}


@dataclass(frozen=True)
class ModelSnapshot:
    """Immutable view of the model taken between two reducer calls."""

    generation: int = 0
    node_status: NodeStatus = field(default_factory=NodeStatus)
    apps: Mapping[UUID, AppInstance] = field(default_factory=lambda: MappingProxyType({}))
    network: tuple[NetworkInterface, ...] = ()
    vault_status: VaultStatus = field(default_factory=VaultUnknown)
    downloader: DownloaderStatus | None = None
    dmesg: tuple[DmesgEntry, ...] = ()

    def interface(self, name: str) -> NetworkInterface | None:
        for iface in self.network:
            if iface.name == name:
                return iface
        return None

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for ``--json``; union variants carry a ``kind`` key."""
        node = self.node_status
        return {
            "generation": self.generation,
            "node_status": {
                "server": node.server,
                "app_summary": asdict(node.app_summary),
                "onboarding": _tagged(node.onboarding),
            },
            "apps": {str(uuid): {**asdict(app), "state": _tagged(app.state)} for uuid, app in self.apps.items()},
            "network": [asdict(iface) for iface in self.network],
            "vault_status": _tagged(self.vault_status),
            "downloader": asdict(self.downloader) if self.downloader is not None else None,
            "dmesg": len(self.dmesg),
        }


class Model:
    """Single owner of device state.

    Each ``update_*`` method is the only way to change one fragment.  The
    reducer runs entirely under ``_lock`` and ``snapshot()`` copies the
    fragment references under the same lock, so a reader never observes a
    partially applied update.  Fragments are replaced, never mutated.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._node_status = NodeStatus()
        self._apps: dict[UUID, AppInstance] = {}
        self._network: tuple[NetworkInterface, ...] = ()
        self._vault_status: VaultStatus = VaultUnknown()
        self._downloader: DownloaderStatus | None = None
        self._dmesg: tuple[DmesgEntry, ...] = ()

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def snapshot(self) -> ModelSnapshot:
        with self._lock:
            return ModelSnapshot(
                generation=self._generation,
                node_status=self._node_status,
                apps=MappingProxyType(self._apps),
                network=self._network,
                vault_status=self._vault_status,
                downloader=self._downloader,
                dmesg=self._dmesg,
            )

    def _apply(self, attr: str, reducer: Callable[[Any, Any], Any], message: Any) -> None:
        with self._lock:
            new_value = reducer(getattr(self, attr), message)
            setattr(self, attr, new_value)
            self._generation += 1
            generation = self._generation
        log.debug("applied %s (generation %d)", reducer.__name__, generation)

    def update_node_status(self, message: EveNodeStatus) -> None:
        self._apply("_node_status", reducers.reduce_node_status, message)

    def update_onboarding_status(self, message: EveOnboardingStatus) -> None:
        self._apply("_node_status", reducers.reduce_onboarding_status, message)

    def update_app_summary(self, message: AppInstanceSummaryMessage) -> None:
        self._apply("_node_status", reducers.reduce_app_summary, message)

    def update_app_status(self, message: AppInstanceStatus) -> None:
        self._apply("_apps", reducers.reduce_app_status, message)

    def update_app_list(self, message: AppsList) -> None:
        self._apply("_apps", reducers.reduce_app_list, message)

    def update_network_status(self, message: DeviceNetworkStatus) -> None:
        self._apply("_network", reducers.reduce_network_status, message)

    def update_vault_status(self, message: EveVaultStatus) -> None:
        self._apply("_vault_status", reducers.reduce_vault_status, message)

    def update_downloader_status(self, message: DownloaderStatus) -> None:
        self._apply("_downloader", reducers.reduce_downloader_status, message)

    def append_dmesg(self, entries: Iterable[DmesgEntry]) -> None:
        self._apply("_dmesg", reducers.reduce_dmesg, list(entries))
