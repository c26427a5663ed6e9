from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from eve_tui.ui.focus import FocusTracker  # noqa: E402


class FocusTrackerTests(unittest.TestCase):
    def test_empty_registry(self):
        tracker = FocusTracker()
        self.assertIsNone(tracker.focus_next())
        self.assertIsNone(tracker.focus_prev())
        self.assertIsNone(tracker.get_focused_view())

    def test_next_cycles_in_registration_order(self):
        tracker = FocusTracker(["a", "b", "c"])
        self.assertEqual([tracker.focus_next() for _ in range(4)], ["a", "b", "c", "a"])

    def test_prev_starts_from_last(self):
        tracker = FocusTracker(["a", "b", "c"])
        self.assertEqual([tracker.focus_prev() for _ in range(4)], ["c", "b", "a", "c"])

    def test_next_then_prev_returns_to_start(self):
        tracker = FocusTracker(["a", "b", "c"])
        tracker.set_focus("b")
        tracker.focus_next()
        self.assertEqual(tracker.focus_prev(), "b")

    def test_set_focus_unknown_is_noop(self):
        tracker = FocusTracker(["a", "b"])
        tracker.set_focus("a")
        self.assertFalse(tracker.set_focus("zzz"))
        self.assertEqual(tracker.get_focused_view(), "a")

    def test_duplicate_add_ignored(self):
        tracker = FocusTracker(["a", "a", "b"])
        self.assertEqual(len(tracker), 2)

    def test_remove_focused_clears(self):
        tracker = FocusTracker(["a", "b", "c"])
        tracker.set_focus("b")
        tracker.remove("b")
        self.assertIsNone(tracker.get_focused_view())
        self.assertEqual(tracker.focus_next(), "a")

    def test_remove_other_keeps_focus(self):
        tracker = FocusTracker(["a", "b", "c"])
        tracker.set_focus("c")
        tracker.remove("a")
        self.assertEqual(tracker.get_focused_view(), "c")
        self.assertEqual(tracker.focus_next(), "b")

    def test_clear(self):
        tracker = FocusTracker(["a", "b"])
        tracker.focus_next()
        tracker.clear()
        self.assertIsNone(tracker.get_focused_view())


if __name__ == "__main__":
    unittest.main()
