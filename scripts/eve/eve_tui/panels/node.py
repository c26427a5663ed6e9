"""Node identity, onboarding and vault renderers."""

from __future__ import annotations

from rich.panel import Panel
from rich.text import Text

from eve_tui.formatting import compact_time, join_or_dash
from eve_tui.models import (
    EncryptionDisabled,
    Locked,
    NodeStatus,
    Onboarded,
    Onboarding,
    OnboardingError,
    OnboardingStatus,
    OnboardingUnknown,
    Unlocked,
    VaultStatus,
    VaultUnknown,
)
from eve_tui.panels import kv_table, panel_from_table


def onboarding_text(status: OnboardingStatus) -> tuple[str, str]:
    """(label, panel status) for an onboarding state."""
    if isinstance(status, OnboardingUnknown):
        return "unknown", "warn"
    if isinstance(status, Onboarding):
        return "onboarding...", "warn"
    if isinstance(status, Onboarded):
        return f"onboarded ({status.device_id})", "ok"
    if isinstance(status, OnboardingError):
        return f"error: {status.reason}", "error"
    raise TypeError(f"unknown onboarding status: {status!r}")


def vault_rows(status: VaultStatus) -> tuple[list[tuple[str, str]], str]:
    if isinstance(status, VaultUnknown):
        return [("Vault", "unknown")], "warn"
    if isinstance(status, EncryptionDisabled):
        return [
            ("Vault", "encryption disabled"),
            ("TPM", "used" if status.tpm_used else "not used"),
            ("Reason", status.reason.error or "-"),
            ("Since", compact_time(status.reason.time)),
        ], "warn"
    if isinstance(status, Unlocked):
        return [
            ("Vault", "unlocked"),
            ("TPM", "used" if status.tpm_used else "not used"),
        ], "ok"
    if isinstance(status, Locked):
        rows = [
            ("Vault", "LOCKED"),
            ("Reason", status.reason.error or "-"),
            ("Since", compact_time(status.reason.time)),
        ]
        if status.mismatching_pcrs is not None:
            rows.append(("Mismatching PCRs", join_or_dash(status.mismatching_pcrs)))
        return rows, "error"
    raise TypeError(f"unknown vault status: {status!r}")


def render_node(node: NodeStatus) -> Panel:
    label, status = onboarding_text(node.onboarding)
    rows = [
        ("Controller", node.server or "-"),
        ("Onboarding", label),
    ]
    return panel_from_table("Node", status, kv_table(rows))


def render_vault(vault: VaultStatus) -> Panel:
    rows, status = vault_rows(vault)
    return panel_from_table("Vault", status, kv_table(rows))


def render_onboarding_banner(node: NodeStatus) -> Text:
    label, status = onboarding_text(node.onboarding)
    style = {"ok": "green", "warn": "yellow", "error": "bold red"}[status]
    return Text(f"Onboarding: {label}", style=style)
