"""Decoding of EVE pubsub status messages.

Every topic publishes Go structs serialised as JSON.  Field names are
PascalCase apart from a handful of explicit renames, absent fields take the
type's zero value, and zero timestamps are written as ``0001-01-01T00:00:00Z``.
Decoders raise ``DecodeError`` for anything they cannot make sense of; the
collector that owns the topic logs and drops such messages.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from ipaddress import ip_address, ip_network
from typing import Any, TypeVar
from uuid import UUID

from eve_tui.formatting import parse_iso_timestamp
from eve_tui.models import IpAddress, IpNetwork

log = logging.getLogger(__name__)

ZERO_UUID = "00000000-0000-0000-0000-000000000000"


class DecodeError(ValueError):
    pass


class SwState(IntEnum):
    INITIAL = 100
    RESOLVING_TAG = 101
    RESOLVED_TAG = 102
    DOWNLOADING = 103
    DOWNLOADED = 104
    VERIFYING = 105
    VERIFIED = 106
    LOADING = 107
    LOADED = 108
    CREATING_VOLUME = 109
    CREATED_VOLUME = 110
    INSTALLED = 111
    AWAIT_NETWORK_INSTANCE = 112
    START_DELAYED = 113
    BOOTING = 114
    RUNNING = 115
    PAUSING = 116
    PAUSED = 117
    HALTING = 118
    HALTED = 119
    BROKEN = 120
    UNKNOWN = 121
    PENDING = 122
    SCHEDULING = 123
    FAILED = 124
    MAX_STATE = 125


class DataSecAtRestStatus(IntEnum):
    UNKNOWN = 0
    DISABLED = 1
    ENABLED = 2
    ERROR = 4


class PCRStatus(IntEnum):
    UNKNOWN = 0
    ENABLED = 1
    DISABLED = 2


class DhcpType(IntEnum):
    NOOP = 0
    STATIC = 1
    NONE = 2
    DEPRECATED = 3
    CLIENT = 4


class ErrorSeverity(IntEnum):
    UNSPECIFIED = 0
    NOTICE = 1
    WARNING = 2
    ERROR = 3


E = TypeVar("E", bound=IntEnum)


def coerce_enum(enum_cls: type[E], value: Any) -> E | int:
    """Map a wire integer to ``enum_cls``; unknown values stay plain ints."""
    if value is None:
        value = 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{enum_cls.__name__}: expected integer, got {value!r}")
    try:
        return enum_cls(value)
    except ValueError:
        log.warning("unknown %s value %d", enum_cls.__name__, value)
        return value


def _require_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what}: expected JSON object, got {type(data).__name__}")
    return data


def _get(data: dict[str, Any], name: str, default: Any) -> Any:
    value = data.get(name)
    return default if value is None else value


def _str(data: dict[str, Any], name: str) -> str:
    value = _get(data, name, "")
    if not isinstance(value, str):
        raise DecodeError(f"{name}: expected string, got {value!r}")
    return value


def _bool(data: dict[str, Any], name: str) -> bool:
    return bool(_get(data, name, False))


def _int(data: dict[str, Any], name: str) -> int:
    value = _get(data, name, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{name}: expected integer, got {value!r}")
    return value


def _time(data: dict[str, Any], name: str) -> datetime | None:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{name}: expected timestamp string, got {value!r}")
    return parse_iso_timestamp(value)


def _uuid(value: Any, what: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise DecodeError(f"{what}: invalid UUID {value!r}") from exc


def _ip(value: Any, what: str) -> IpAddress:
    try:
        return ip_address(str(value))
    except ValueError as exc:
        raise DecodeError(f"{what}: invalid IP address {value!r}") from exc


def _ip_list(data: dict[str, Any], name: str) -> tuple[IpAddress, ...] | None:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, list):
        raise DecodeError(f"{name}: expected list, got {value!r}")
    return tuple(_ip(item, name) for item in value)


def decode_mac(value: str | None) -> str | None:
    """Hardware addresses travel as base64 of the raw 6 or 8 bytes."""
    if not value:
        return None
    try:
        raw = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"MacAddr: invalid base64 {value!r}") from exc
    if len(raw) not in (6, 8):
        raise DecodeError(f"MacAddr: invalid MAC address length {len(raw)}")
    return ":".join(f"{byte:02x}" for byte in raw)


def decode_subnet(value: Any) -> IpNetwork | None:
    """``{"IP": "192.168.2.0", "Mask": "////AA=="}`` -> 192.168.2.0/24."""
    if value is None:
        return None
    data = _require_object(value, "Subnet")
    ip = data.get("IP")
    mask = data.get("Mask")
    if not ip or not mask:
        return None
    try:
        mask_bytes = base64.b64decode(mask, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Subnet: invalid mask {mask!r}") from exc
    prefix_len = sum(bin(byte).count("1") for byte in mask_bytes)
    try:
        address = ip_address(ip)
    except ValueError as exc:
        raise DecodeError(f"Subnet: invalid IP {ip!r}") from exc
    try:
        return ip_network(f"{address}/{prefix_len}", strict=False)
    except ValueError:
        # mask too long for the address family; keep the rest of the port
        log.warning("Subnet: prefix /%d does not fit %s, ignored", prefix_len, address)
        return None


@dataclass(frozen=True)
class ErrorDescription:
    error: str = ""
    error_time: datetime | None = None
    severity: ErrorSeverity | int = ErrorSeverity.UNSPECIFIED

    @property
    def is_error(self) -> bool:
        return bool(self.error)


def decode_error_description(data: dict[str, Any]) -> ErrorDescription:
    # flattened into the parent struct on the wire
    return ErrorDescription(
        error=_str(data, "Error"),
        error_time=_time(data, "ErrorTime"),
        severity=coerce_enum(ErrorSeverity, data.get("ErrorSeverity")),
    )


@dataclass(frozen=True)
class AppInstanceStatus:
    uuid: UUID
    version: str
    display_name: str
    state: SwState | int
    error: ErrorDescription = field(default_factory=ErrorDescription)
    activated: bool = False
    boot_time: datetime | None = None


def decode_app_instance_status(payload: Any) -> AppInstanceStatus:
    data = _require_object(payload, "AppInstanceStatus")
    uuid_and_version = _require_object(_get(data, "UUIDandVersion", {}), "UUIDandVersion")
    if "UUID" not in uuid_and_version:
        raise DecodeError("AppInstanceStatus: missing UUIDandVersion.UUID")
    return AppInstanceStatus(
        uuid=_uuid(uuid_and_version["UUID"], "UUIDandVersion.UUID"),
        version=_str(uuid_and_version, "Version"),
        display_name=_str(data, "DisplayName"),
        state=coerce_enum(SwState, data.get("State")),
        error=decode_error_description(data),
        activated=_bool(data, "Activated"),
        boot_time=_time(data, "BootTime"),
    )


@dataclass(frozen=True)
class AppsList:
    apps: tuple[AppInstanceStatus, ...] = ()


def decode_apps_list(payload: Any) -> AppsList:
    data = _require_object(payload, "AppsList")
    apps = _get(data, "apps", [])
    if not isinstance(apps, list):
        raise DecodeError("AppsList: apps must be a list")
    return AppsList(apps=tuple(decode_app_instance_status(app) for app in apps))


@dataclass(frozen=True)
class NetworkPortStatus:
    if_name: str
    is_mgmt: bool = False
    dhcp: DhcpType | int = DhcpType.NOOP
    up: bool = False
    ipv4_subnet: IpNetwork | None = None
    dns_servers: tuple[IpAddress, ...] | None = None
    addresses: tuple[IpAddress, ...] = ()
    mac: str | None = None
    default_routers: tuple[IpAddress, ...] | None = None
    mtu: int = 0
    last_error: str = ""


def decode_network_port_status(payload: Any) -> NetworkPortStatus:
    data = _require_object(payload, "NetworkPortStatus")
    addr_info = _get(data, "AddrInfoList", [])
    if not isinstance(addr_info, list):
        raise DecodeError("AddrInfoList: expected list")
    addresses = tuple(
        _ip(_require_object(item, "AddrInfo").get("Addr"), "AddrInfo.Addr") for item in addr_info
    )
    subnet_field = "IPv4Subnet" if "IPv4Subnet" in data else "Subnet"
    return NetworkPortStatus(
        if_name=_str(data, "IfName"),
        is_mgmt=_bool(data, "IsMgmt"),
        dhcp=coerce_enum(DhcpType, data.get("Dhcp")),
        up=_bool(data, "Up"),
        ipv4_subnet=decode_subnet(data.get(subnet_field)),
        dns_servers=_ip_list(data, "DNSServers"),
        addresses=addresses,
        mac=decode_mac(data.get("MacAddr")),
        default_routers=_ip_list(data, "DefaultRouters"),
        mtu=_int(data, "MTU"),
        last_error=_str(data, "LastError"),
    )


@dataclass(frozen=True)
class DeviceNetworkStatus:
    dpc_key: str = ""
    ports: tuple[NetworkPortStatus, ...] | None = None


def decode_device_network_status(payload: Any) -> DeviceNetworkStatus:
    data = _require_object(payload, "DeviceNetworkStatus")
    ports = data.get("Ports")
    if ports is not None and not isinstance(ports, list):
        raise DecodeError("DeviceNetworkStatus: Ports must be a list")
    return DeviceNetworkStatus(
        dpc_key=_str(data, "DPCKey"),
        ports=None if ports is None else tuple(decode_network_port_status(p) for p in ports),
    )


@dataclass(frozen=True)
class EveVaultStatus:
    name: str
    status: DataSecAtRestStatus | int
    pcr_status: PCRStatus | int
    conversion_complete: bool = False
    mismatching_pcrs: tuple[int, ...] | None = None
    error: ErrorDescription = field(default_factory=ErrorDescription)


def decode_vault_status(payload: Any) -> EveVaultStatus:
    data = _require_object(payload, "VaultStatus")
    pcrs = data.get("MismatchingPCRs")
    if pcrs is not None:
        if not isinstance(pcrs, list) or not all(isinstance(p, int) for p in pcrs):
            raise DecodeError("MismatchingPCRs: expected list of integers")
        pcrs = tuple(pcrs)
    return EveVaultStatus(
        name=_str(data, "Name"),
        status=coerce_enum(DataSecAtRestStatus, data.get("Status")),
        pcr_status=coerce_enum(PCRStatus, data.get("PCRStatus")),
        conversion_complete=_bool(data, "ConversionComplete"),
        mismatching_pcrs=pcrs,
        error=decode_error_description(data),
    )


@dataclass(frozen=True)
class DownloaderStatus:
    name: str
    image_sha256: str = ""
    state: SwState | int = 0
    progress: int = 0
    total_size: int = 0
    current_size: int = 0
    last_use: datetime | None = None
    mod_time: datetime | None = None
    error: ErrorDescription = field(default_factory=ErrorDescription)


def decode_downloader_status(payload: Any) -> DownloaderStatus:
    data = _require_object(payload, "DownloaderStatus")
    return DownloaderStatus(
        name=_str(data, "Name"),
        image_sha256=_str(data, "ImageSha256"),
        state=coerce_enum(SwState, data.get("State")) if data.get("State") is not None else 0,
        progress=_int(data, "Progress"),
        total_size=_int(data, "TotalSize"),
        current_size=_int(data, "CurrentSize"),
        last_use=_time(data, "LastUse"),
        mod_time=_time(data, "ModTime"),
        error=decode_error_description(data),
    )


@dataclass(frozen=True)
class AppInstanceSummaryMessage:
    total_starting: int = 0
    total_running: int = 0
    total_stopping: int = 0
    total_error: int = 0


def decode_app_summary(payload: Any) -> AppInstanceSummaryMessage:
    data = _require_object(payload, "AppInstanceSummary")
    return AppInstanceSummaryMessage(
        total_starting=_int(data, "TotalStarting"),
        total_running=_int(data, "TotalRunning"),
        total_stopping=_int(data, "TotalStopping"),
        total_error=_int(data, "TotalError"),
    )


@dataclass(frozen=True)
class EveNodeStatus:
    server: str | None = None
    node_uuid: UUID | None = None
    onboarded: bool = False
    app_instance_summary: AppInstanceSummaryMessage | None = None


def decode_node_status(payload: Any) -> EveNodeStatus:
    # produced by the monitor service itself, so snake_case
    data = _require_object(payload, "NodeStatus")
    raw_uuid = data.get("node_uuid")
    node_uuid = None
    if raw_uuid and raw_uuid != ZERO_UUID:
        node_uuid = _uuid(raw_uuid, "node_uuid")
    summary = data.get("app_instance_summary")
    server = data.get("server")
    return EveNodeStatus(
        server=str(server) if server else None,
        node_uuid=node_uuid,
        onboarded=_bool(data, "onboarded"),
        app_instance_summary=decode_app_summary(summary) if summary is not None else None,
    )


@dataclass(frozen=True)
class EveOnboardingStatus:
    device_uuid: UUID
    hardware_model: str = ""


def decode_onboarding_status(payload: Any) -> EveOnboardingStatus:
    data = _require_object(payload, "OnboardingStatus")
    if not data.get("DeviceUUID"):
        raise DecodeError("OnboardingStatus: missing DeviceUUID")
    return EveOnboardingStatus(
        device_uuid=_uuid(data["DeviceUUID"], "DeviceUUID"),
        hardware_model=_str(data, "HardwareModel"),
    )
