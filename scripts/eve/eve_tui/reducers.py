"""Pure reducers: ``(old fragment, message) -> new fragment``.

Reducers never mutate their inputs and never raise for a decoded message.
``eve_tui.state.Model`` applies them under its lock.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, Mapping
from uuid import UUID

from eve_tui.messages import (
    AppInstanceStatus,
    AppInstanceSummaryMessage,
    AppsList,
    DataSecAtRestStatus,
    DeviceNetworkStatus,
    DownloaderStatus,
    ErrorDescription,
    EveNodeStatus,
    EveOnboardingStatus,
    EveVaultStatus,
    NetworkPortStatus,
    PCRStatus,
)
from eve_tui.models import (
    AppError,
    AppInstance,
    AppInstanceSummary,
    AppNormal,
    DmesgEntry,
    EncryptionDisabled,
    EveError,
    Locked,
    NetworkInterface,
    NodeStatus,
    Onboarded,
    Onboarding,
    OnboardingError,
    OnboardingStatus,
    Unlocked,
    VaultStatus,
    VaultUnknown,
)

VAULT_KEY_UNAVAILABLE = "Vault key unavailable"
DMESG_CAPACITY = 1000


def to_eve_error(error: ErrorDescription) -> EveError:
    return EveError(error=error.error, time=error.error_time)


def to_app_instance(status: AppInstanceStatus) -> AppInstance:
    if status.error.is_error:
        state = AppError(status.state, status.error.error)
    else:
        state = AppNormal(status.state)
    return AppInstance(
        uuid=status.uuid,
        name=status.display_name,
        version=status.version,
        state=state,
    )


def to_app_summary(message: AppInstanceSummaryMessage | None) -> AppInstanceSummary:
    if message is None:
        return AppInstanceSummary()
    return AppInstanceSummary(
        starting=message.total_starting,
        running=message.total_running,
        stopping=message.total_stopping,
        error=message.total_error,
    )


def to_network_interface(port: NetworkPortStatus) -> NetworkInterface:
    return NetworkInterface(
        name=port.if_name,
        is_mgmt=port.is_mgmt,
        addresses=port.addresses,
        gateways=port.default_routers,
        mac=port.mac,
        dhcp=port.dhcp,
        up=port.up,
        subnet=port.ipv4_subnet,
        dns_servers=port.dns_servers or (),
        last_error=port.last_error,
    )


def onboarding_from_node(message: EveNodeStatus) -> OnboardingStatus:
    if message.onboarded and message.node_uuid is not None:
        return Onboarded(message.node_uuid)
    if message.onboarded:
        return OnboardingError("Node UUID is missing")
    return Onboarding()


def reduce_node_status(old: NodeStatus, message: EveNodeStatus) -> NodeStatus:
    return NodeStatus(
        server=message.server,
        app_summary=to_app_summary(message.app_instance_summary),
        onboarding=onboarding_from_node(message),
    )


def reduce_onboarding_status(old: NodeStatus, message: EveOnboardingStatus) -> NodeStatus:
    return NodeStatus(
        server=old.server,
        app_summary=old.app_summary,
        onboarding=Onboarded(message.device_uuid),
    )


def reduce_app_summary(old: NodeStatus, message: AppInstanceSummaryMessage) -> NodeStatus:
    return NodeStatus(
        server=old.server,
        app_summary=to_app_summary(message),
        onboarding=old.onboarding,
    )


def reduce_app_status(
    old: Mapping[UUID, AppInstance], message: AppInstanceStatus
) -> dict[UUID, AppInstance]:
    apps = dict(old)
    apps[message.uuid] = to_app_instance(message)
    return apps


def reduce_app_list(old: Mapping[UUID, AppInstance], message: AppsList) -> dict[UUID, AppInstance]:
    return {app.uuid: to_app_instance(app) for app in message.apps}


def reduce_network_status(
    old: tuple[NetworkInterface, ...], message: DeviceNetworkStatus
) -> tuple[NetworkInterface, ...]:
    if message.ports is None:
        return ()
    return tuple(to_network_interface(port) for port in message.ports)


def reduce_vault_status(old: VaultStatus, message: EveVaultStatus) -> VaultStatus:
    tpm_used = message.pcr_status == PCRStatus.ENABLED
    status = message.status
    if status == DataSecAtRestStatus.DISABLED:
        return EncryptionDisabled(to_eve_error(message.error), tpm_used)
    if status == DataSecAtRestStatus.ENABLED:
        return Unlocked(tpm_used)
    if status == DataSecAtRestStatus.ERROR:
        reason = to_eve_error(message.error)
        pcrs = message.mismatching_pcrs if VAULT_KEY_UNAVAILABLE in reason.error else None
        return Locked(reason, pcrs)
    # DataSecAtRestStatus.UNKNOWN and values we do not recognise
    return VaultUnknown()


def reduce_downloader_status(
    old: DownloaderStatus | None, message: DownloaderStatus
) -> DownloaderStatus:
    return message


def reduce_dmesg(
    old: tuple[DmesgEntry, ...], entries: Iterable[DmesgEntry]
) -> tuple[DmesgEntry, ...]:
    ring: deque[DmesgEntry] = deque(old, maxlen=DMESG_CAPACITY)
    ring.extend(entries)
    return tuple(ring)
