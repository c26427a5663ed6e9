from __future__ import annotations

import json
import threading
import unittest
from pathlib import Path
from uuid import UUID
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from eve_tui.messages import (  # noqa: E402
    AppInstanceStatus,
    AppInstanceSummaryMessage,
    AppsList,
    EveNodeStatus,
    SwState,
)
from eve_tui.models import AppInstanceSummary, DmesgEntry, Onboarded  # noqa: E402
from eve_tui.state import Model  # noqa: E402

NODE_ID = UUID("11111111-2222-3333-4444-555555555555")


def app(index: int) -> AppInstanceStatus:
    return AppInstanceStatus(
        uuid=UUID(int=index + 1),
        version="1",
        display_name=f"app-{index}",
        state=SwState.RUNNING,
    )


class ModelTests(unittest.TestCase):
    def test_generation_counts_updates(self):
        model = Model()
        self.assertEqual(model.generation, 0)
        model.update_app_status(app(0))
        model.update_app_summary(AppInstanceSummaryMessage(total_running=1))
        self.assertEqual(model.generation, 2)
        self.assertEqual(model.snapshot().generation, 2)

    def test_snapshot_is_stable_after_later_updates(self):
        model = Model()
        model.update_app_status(app(0))
        snap = model.snapshot()
        model.update_app_status(app(1))
        self.assertEqual(len(snap.apps), 1)
        self.assertEqual(len(model.snapshot().apps), 2)

    def test_snapshot_apps_read_only(self):
        model = Model()
        model.update_app_status(app(0))
        with self.assertRaises(TypeError):
            model.snapshot().apps[UUID(int=99)] = None

    def test_node_and_summary_share_fragment(self):
        model = Model()
        model.update_node_status(EveNodeStatus(server="s", node_uuid=NODE_ID, onboarded=True))
        model.update_app_summary(AppInstanceSummaryMessage(total_running=4))
        node = model.snapshot().node_status
        self.assertEqual(node.onboarding, Onboarded(NODE_ID))
        self.assertEqual(node.app_summary, AppInstanceSummary(running=4))

    def test_concurrent_writers_never_lose_updates(self):
        model = Model()
        per_thread = 200

        def writer(offset: int) -> None:
            for index in range(per_thread):
                model.update_app_status(app(offset + index))

        threads = [threading.Thread(target=writer, args=(n * per_thread,)) for n in range(4)]
        seen_sizes = []
        for thread in threads:
            thread.start()
        while any(thread.is_alive() for thread in threads):
            seen_sizes.append(len(model.snapshot().apps))
        for thread in threads:
            thread.join()

        snap = model.snapshot()
        self.assertEqual(len(snap.apps), 4 * per_thread)
        self.assertEqual(snap.generation, 4 * per_thread)
        # snapshots only ever grow, each one a complete state
        self.assertEqual(seen_sizes, sorted(seen_sizes))

    def test_app_list_replaces(self):
        model = Model()
        model.update_app_status(app(0))
        model.update_app_list(AppsList(apps=(app(5),)))
        self.assertEqual(list(model.snapshot().apps), [UUID(int=6)])

    def test_dmesg_appends(self):
        model = Model()
        model.append_dmesg([DmesgEntry(6, 1, 10, "a")])
        model.append_dmesg(iter([DmesgEntry(6, 2, 20, "b")]))
        self.assertEqual([entry.message for entry in model.snapshot().dmesg], ["a", "b"])

    def test_to_dict_is_json_friendly(self):
        model = Model()
        model.update_node_status(EveNodeStatus(node_uuid=NODE_ID, onboarded=True))
        model.update_app_status(app(0))
        data = json.loads(json.dumps(model.snapshot().to_dict(), default=str))
        self.assertEqual(data["node_status"]["onboarding"]["kind"], "Onboarded")
        self.assertEqual(data["vault_status"], {"kind": "VaultUnknown"})
        self.assertEqual(data["apps"][str(UUID(int=1))]["state"]["kind"], "AppNormal")


if __name__ == "__main__":
    unittest.main()
