"""Tests for StagingController.

Tests cover:
- Dispatch of every action kind to the change applier
- Selection updates after hunk actions, select_file and discard_file
- Hunk lookup against a fresh diff, and no-op for a missing hunk
- Failures reported as error messages instead of propagating
"""

import asyncio
import tempfile
import unittest

from hunkstage.domain.status import ChangeStatus
from hunkstage.domain.view import Selection
from hunkstage.infrastructure.git.runner import CommandResult
from hunkstage.services.refresh_coordinator import RefreshCoordinator
from hunkstage.services.staging_controller import ActionKind, StagingAction, StagingController
from tests.fakes import FakeRepository


UNSTAGED_DIFF = (
    "diff --git a/f.txt b/f.txt\n"
    "--- a/f.txt\n"
    "+++ b/f.txt\n"
    "@@ -1,2 +1,3 @@\n"
    " a\n"
    "+b\n"
    " c\n"
    "@@ -10,2 +11,2 @@\n"
    "-x\n"
    "+y\n"
    " z\n"
)

STAGED_DIFF = (
    "diff --git a/f.txt b/f.txt\n"
    "--- a/f.txt\n"
    "+++ b/f.txt\n"
    "@@ -4 +4 @@\n"
    "-old\n"
    "+new\n"
)


class TestStagingAction(unittest.TestCase):
    """Tests for StagingAction validation."""

    def test_path_required(self):
        with self.assertRaises(ValueError):
            StagingAction(ActionKind.STAGE_FILE)

    def test_hunk_index_required(self):
        with self.assertRaises(ValueError):
            StagingAction(ActionKind.STAGE_HUNK, path="f.txt")

    def test_discard_requires_status(self):
        with self.assertRaises(ValueError):
            StagingAction(ActionKind.DISCARD_FILE, path="f.txt")

    def test_repository_wide_actions_need_nothing(self):
        for kind in (ActionKind.STAGE_ALL, ActionKind.UNSTAGE_ALL, ActionKind.REFRESH):
            self.assertEqual(StagingAction(kind).kind, kind)


class TestStagingController(unittest.TestCase):
    """Tests for StagingController.handle."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.repository = FakeRepository(
            self.tmpdir.name,
            diffs={("f.txt", False): UNSTAGED_DIFF, ("f.txt", True): STAGED_DIFF},
        )
        self.published = []

        async def provider():
            return self.repository

        self.coordinator = RefreshCoordinator(provider, self.published.append)
        self.controller = StagingController(self.coordinator, self.published.append)

    def tearDown(self):
        self.tmpdir.cleanup()

    def handle(self, action: StagingAction) -> bool:
        return asyncio.run(self.controller.handle(action))

    # --------------------------------------------------------
    # File actions
    # --------------------------------------------------------

    def test_stage_file_then_refresh(self):
        ok = self.handle(StagingAction(ActionKind.STAGE_FILE, path="f.txt"))

        self.assertTrue(ok)
        self.assertEqual(self.repository.call_names(), ["add_to_index", "read_status"])
        self.assertEqual(len(self.published), 1)
        self.assertFalse(self.published[0].is_error)

    def test_unstage_all(self):
        self.assertTrue(self.handle(StagingAction(ActionKind.UNSTAGE_ALL)))
        self.assertIn(("reset_index", None), self.repository.calls)

    def test_discard_file_clears_selection(self):
        self.coordinator.selection = Selection("f.txt", staged=False)

        ok = self.handle(StagingAction(ActionKind.DISCARD_FILE, path="f.txt", status=ChangeStatus.MODIFIED))

        self.assertTrue(ok)
        self.assertIsNone(self.coordinator.selection)
        self.assertIsNone(self.published[-1].data.selected_file)

    # --------------------------------------------------------
    # Hunk actions
    # --------------------------------------------------------

    def test_stage_hunk_uses_unstaged_diff(self):
        ok = self.handle(StagingAction(ActionKind.STAGE_HUNK, path="f.txt", hunk_index=1))

        self.assertTrue(ok)
        self.assertIn(("get_diff", "f.txt", False), self.repository.calls)
        self.assertIn(("apply_patch", True, False), self.repository.calls)
        self.assertIn("@@ -10,2 +11,2 @@", self.repository.applied_patches[0])
        self.assertNotIn("+b", self.repository.applied_patches[0])
        self.assertEqual(self.coordinator.selection, Selection("f.txt", staged=False))

    def test_unstage_hunk_uses_staged_diff(self):
        ok = self.handle(StagingAction(ActionKind.UNSTAGE_HUNK, path="f.txt", hunk_index=0))

        self.assertTrue(ok)
        self.assertIn(("get_diff", "f.txt", True), self.repository.calls)
        self.assertIn(("apply_patch", True, True), self.repository.calls)
        self.assertEqual(self.coordinator.selection, Selection("f.txt", staged=True))
        self.assertTrue(self.published[-1].data.selected_file.staged)

    def test_discard_hunk_reverse_applies_to_working_copy(self):
        ok = self.handle(StagingAction(ActionKind.DISCARD_HUNK, path="f.txt", hunk_index=0))

        self.assertTrue(ok)
        self.assertIn(("apply_patch", False, True), self.repository.calls)

    def test_missing_hunk_is_a_no_op(self):
        ok = self.handle(StagingAction(ActionKind.STAGE_HUNK, path="f.txt", hunk_index=5))

        self.assertTrue(ok)
        self.assertNotIn("apply_patch", self.repository.call_names())
        self.assertEqual(self.published, [])

    def test_hunk_on_file_without_changes_is_a_no_op(self):
        ok = self.handle(StagingAction(ActionKind.STAGE_HUNK, path="clean.txt", hunk_index=0))

        self.assertTrue(ok)
        self.assertNotIn("apply_patch", self.repository.call_names())

    # --------------------------------------------------------
    # Selection and refresh
    # --------------------------------------------------------

    def test_select_file_publishes_its_diff(self):
        ok = self.handle(StagingAction(ActionKind.SELECT_FILE, path="f.txt", staged=False))

        self.assertTrue(ok)
        selected = self.published[-1].data.selected_file
        self.assertEqual(selected.path, "f.txt")
        self.assertEqual(len(selected.hunks), 2)

    def test_refresh_publishes_update(self):
        self.assertTrue(self.handle(StagingAction(ActionKind.REFRESH)))
        self.assertEqual(len(self.published), 1)

    # --------------------------------------------------------
    # Failures
    # --------------------------------------------------------

    def test_apply_failure_is_reported(self):
        self.repository.results["apply_patch"] = CommandResult(1, stderr="error: patch failed: f.txt:10\n")

        ok = self.handle(StagingAction(ActionKind.STAGE_HUNK, path="f.txt", hunk_index=0))

        self.assertFalse(ok)
        self.assertEqual(len(self.published), 1)
        message = self.published[0]
        self.assertTrue(message.is_error)
        self.assertEqual(message.message, "error: patch failed: f.txt:10")
        self.assertEqual(message.to_dict(), {
            "type": "error",
            "message": "error: patch failed: f.txt:10",
            "action": "stage_hunk",
        })

    def test_os_error_is_reported(self):
        self.repository.results["add_to_index"] = PermissionError("index.lock: Permission denied")

        ok = self.handle(StagingAction(ActionKind.STAGE_ALL))

        self.assertFalse(ok)
        self.assertEqual(self.published[0].message, "index.lock: Permission denied")
        self.assertEqual(self.published[0].details, {"action": "stage_all"})


if __name__ == "__main__":
    unittest.main()
