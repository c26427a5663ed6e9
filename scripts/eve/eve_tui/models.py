"""Device-state domain types shared by reducers, the model and the panels.

The enum-with-payload states are frozen dataclasses grouped under a union
alias.  Consumers dispatch on the concrete class and raise ``TypeError`` for
anything they do not recognise, so a new variant cannot be silently ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from ipaddress import (
    IPv4Address,
    IPv4Interface,
    IPv4Network,
    IPv6Address,
    IPv6Interface,
    IPv6Network,
)
from typing import Any, Union
from uuid import UUID

IpAddress = Union[IPv4Address, IPv6Address]
IpNetwork = Union[IPv4Network, IPv6Network]
IpInterface = Union[IPv4Interface, IPv6Interface]


@dataclass(frozen=True)
class EveError:
    error: str
    time: datetime | None = None


# OnboardingStatus


@dataclass(frozen=True)
class OnboardingUnknown:
    pass


@dataclass(frozen=True)
class Onboarding:
    pass


@dataclass(frozen=True)
class Onboarded:
    device_id: UUID


@dataclass(frozen=True)
class OnboardingError:
    reason: str


OnboardingStatus = Union[OnboardingUnknown, Onboarding, Onboarded, OnboardingError]


# AppInstanceState


@dataclass(frozen=True)
class AppNormal:
    code: Any


@dataclass(frozen=True)
class AppError:
    code: Any
    reason: str


AppInstanceState = Union[AppNormal, AppError]


# VaultStatus


@dataclass(frozen=True)
class VaultUnknown:
    pass


@dataclass(frozen=True)
class EncryptionDisabled:
    reason: EveError
    tpm_used: bool


@dataclass(frozen=True)
class Unlocked:
    tpm_used: bool


@dataclass(frozen=True)
class Locked:
    reason: EveError
    mismatching_pcrs: tuple[int, ...] | None = None


VaultStatus = Union[VaultUnknown, EncryptionDisabled, Unlocked, Locked]


@dataclass(frozen=True)
class AppInstanceSummary:
    starting: int = 0
    running: int = 0
    stopping: int = 0
    error: int = 0

    @property
    def total(self) -> int:
        return self.starting + self.running + self.stopping + self.error


@dataclass(frozen=True)
class NodeStatus:
    server: str | None = None
    app_summary: AppInstanceSummary = field(default_factory=AppInstanceSummary)
    onboarding: OnboardingStatus = field(default_factory=OnboardingUnknown)


@dataclass(frozen=True)
class AppInstance:
    uuid: UUID
    name: str
    version: str
    state: AppInstanceState


@dataclass(frozen=True)
class NetworkInterface:
    name: str
    is_mgmt: bool
    addresses: tuple[IpAddress, ...] = ()
    gateways: tuple[IpAddress, ...] | None = None
    mac: str | None = None
    dhcp: Any = None
    up: bool = False
    subnet: IpNetwork | None = None
    dns_servers: tuple[IpAddress, ...] = ()
    last_error: str = ""


@dataclass(frozen=True)
class DmesgEntry:
    level: int
    sequence: int
    timestamp_us: int
    message: str


def is_app_error(state: AppInstanceState) -> bool:
    if isinstance(state, AppError):
        return True
    if isinstance(state, AppNormal):
        return False
    raise TypeError(f"unknown app state: {state!r}")


@dataclass(frozen=True)
class InterfaceConfig:
    """Operator-requested IP configuration for one port."""

    dhcp: bool
    address: IpInterface | None = None
    gateway: IpAddress | None = None
    dns_servers: tuple[IpAddress, ...] = ()

    def describe(self) -> str:
        if self.dhcp:
            return "DHCP"
        parts = [f"static {self.address}"]
        if self.gateway is not None:
            parts.append(f"gw {self.gateway}")
        if self.dns_servers:
            parts.append("dns " + ",".join(str(d) for d in self.dns_servers))
        return " ".join(parts)
