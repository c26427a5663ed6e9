from __future__ import annotations

import io
import unittest
from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID
import sys

from rich.console import Console

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from eve_tui.formatting import (  # noqa: E402
    dhcp_label,
    enum_label,
    human_bytes,
    join_or_dash,
    kmsg_timestamp,
    parse_iso_timestamp,
)
from eve_tui.messages import SwState  # noqa: E402
from eve_tui.models import (  # noqa: E402
    AppError,
    AppInstance,
    AppNormal,
    DmesgEntry,
    EveError,
    Locked,
    NodeStatus,
    Onboarded,
    is_app_error,
)
from eve_tui.panels.apps import render_apps, sorted_apps  # noqa: E402
from eve_tui.panels.dmesg import render_dmesg, visible_entries  # noqa: E402
from eve_tui.panels.node import render_node, render_vault  # noqa: E402


def plain(renderable, width: int = 100) -> str:
    console = Console(file=io.StringIO(), width=width, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


def entries(count: int) -> tuple[DmesgEntry, ...]:
    return tuple(DmesgEntry(level=6, sequence=i, timestamp_us=i * 1_000_000, message=f"msg {i}") for i in range(count))


class FormattingTests(unittest.TestCase):
    def test_go_zero_time_is_never(self):
        self.assertIsNone(parse_iso_timestamp("0001-01-01T00:00:00Z"))
        self.assertIsNone(parse_iso_timestamp(""))
        self.assertIsNone(parse_iso_timestamp("yesterday"))

    def test_go_fraction_lengths(self):
        expected = datetime(2024, 3, 1, 12, 0, 5, 123000, tzinfo=timezone.utc)
        self.assertEqual(parse_iso_timestamp("2024-03-01T12:00:05.123Z"), expected)
        self.assertEqual(parse_iso_timestamp("2024-03-01T12:00:05.123000789Z"), expected)

    def test_offset_normalised_to_utc(self):
        parsed = parse_iso_timestamp("2024-03-01T14:00:00+02:00")
        self.assertEqual(parsed, datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc))

    def test_enum_labels(self):
        self.assertEqual(enum_label(SwState.RUNNING), "RUNNING")
        self.assertEqual(enum_label(999), "?(999)")
        self.assertEqual(enum_label(None), "-")
        self.assertEqual(dhcp_label(4), "DHCP")
        self.assertEqual(dhcp_label(9), "?(9)")

    def test_misc(self):
        self.assertEqual(kmsg_timestamp(5140900), "[     5.140900]")
        self.assertEqual(human_bytes(512), "512 B")
        self.assertEqual(human_bytes(3 * 1024 * 1024), "3.0 MiB")
        self.assertEqual(join_or_dash([]), "-")
        self.assertEqual(join_or_dash([1, 2]), "1, 2")


class PanelReadabilityTests(unittest.TestCase):
    def test_apps_sorted_by_name(self):
        apps = {
            UUID(int=2): AppInstance(UUID(int=2), "zeta", "1", AppNormal(SwState.RUNNING)),
            UUID(int=1): AppInstance(UUID(int=1), "Alpha", "2", AppError(SwState.HALTED, "disk full")),
        }
        self.assertEqual([app.name for app in sorted_apps(apps)], ["Alpha", "zeta"])
        text = plain(render_apps(apps))
        self.assertIn("Applications (2)", text)
        self.assertIn("HALTED: disk full", text)
        self.assertLess(text.index("Alpha"), text.index("zeta"))

    def test_app_error_predicate(self):
        self.assertTrue(is_app_error(AppError(SwState.BROKEN, "crashed")))
        self.assertFalse(is_app_error(AppNormal(SwState.RUNNING)))
        with self.assertRaises(TypeError):
            is_app_error("running")

    def test_apps_empty(self):
        self.assertIn("No applications", plain(render_apps({})))

    def test_node_and_vault(self):
        node = NodeStatus(server="zedcloud.example.net", onboarding=Onboarded(UUID(int=7)))
        text = plain(render_node(node))
        self.assertIn("zedcloud.example.net", text)
        self.assertIn("onboarded", text)
        vault = plain(render_vault(Locked(EveError("TPM sealed key mismatch"), mismatching_pcrs=(1, 7))))
        self.assertIn("LOCKED", vault)
        self.assertIn("1, 7", vault)

    def test_dmesg_window(self):
        ring = entries(10)
        self.assertEqual([e.sequence for e in visible_entries(ring, 3, 0)], [7, 8, 9])
        self.assertEqual([e.sequence for e in visible_entries(ring, 3, 2)], [5, 6, 7])
        self.assertEqual(visible_entries(ring, 0, 0), ())
        self.assertEqual([e.sequence for e in visible_entries(ring, 3, 50)], [])

    def test_dmesg_render(self):
        text = plain(render_dmesg(entries(3), height=10))
        self.assertIn("msg 2", text)
        self.assertIn("Kernel log", text)
        self.assertIn("(-1)", plain(render_dmesg(entries(3), height=10, scroll=1)))
        self.assertIn("No kernel messages", plain(render_dmesg((), height=10)))


if __name__ == "__main__":
    unittest.main()
