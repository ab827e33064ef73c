"""Tests for repository status parsing.

Tests cover:
- Porcelain v1 -z parsing into index, working tree and merge changes
- Status letter mapping, untracked files and intent-to-add entries
- Rename entries carrying the original path
- Re-stamping a snapshot with a new generation
"""

import unittest

from hunkstage.domain.status import ChangeStatus, FileChange, RepositoryState


def porcelain(*entries: str) -> str:
    return "".join(entry + "\0" for entry in entries)


class TestChangeStatus(unittest.TestCase):
    """Tests for ChangeStatus."""

    def test_from_code_known_letters(self):
        self.assertIs(ChangeStatus.from_code("M"), ChangeStatus.MODIFIED)
        self.assertIs(ChangeStatus.from_code("U"), ChangeStatus.UNTRACKED)
        self.assertIs(ChangeStatus.from_code("R"), ChangeStatus.RENAMED)

    def test_from_code_unknown_letter(self):
        self.assertIs(ChangeStatus.from_code("X"), ChangeStatus.UNKNOWN)

    def test_only_untracked_is_untracked(self):
        self.assertTrue(ChangeStatus.UNTRACKED.is_untracked)
        for status in ChangeStatus:
            if status is not ChangeStatus.UNTRACKED:
                self.assertFalse(status.is_untracked)


class TestFromPorcelain(unittest.TestCase):
    """Tests for RepositoryState.from_porcelain."""

    def test_empty_output(self):
        state = RepositoryState.from_porcelain("")

        self.assertEqual(state.index_changes, ())
        self.assertEqual(state.working_tree_changes, ())
        self.assertEqual(state.merge_changes, ())

    def test_staged_and_unstaged_modification(self):
        state = RepositoryState.from_porcelain(porcelain("MM src/app.py"))

        self.assertEqual(state.index_changes, (FileChange("src/app.py", ChangeStatus.MODIFIED),))
        self.assertEqual(state.working_tree_changes, (FileChange("src/app.py", ChangeStatus.MODIFIED),))

    def test_index_only_entries(self):
        state = RepositoryState.from_porcelain(porcelain("A  new.py", "D  gone.py", "M  kept.py"))

        self.assertEqual(
            [(c.path, c.status) for c in state.index_changes],
            [
                ("new.py", ChangeStatus.ADDED),
                ("gone.py", ChangeStatus.DELETED),
                ("kept.py", ChangeStatus.MODIFIED),
            ],
        )
        self.assertEqual(state.working_tree_changes, ())

    def test_worktree_only_entries(self):
        state = RepositoryState.from_porcelain(porcelain(" M edited.py", " D removed.py"))

        self.assertEqual(state.index_changes, ())
        self.assertEqual(
            [(c.path, c.status) for c in state.working_tree_changes],
            [("edited.py", ChangeStatus.MODIFIED), ("removed.py", ChangeStatus.DELETED)],
        )

    def test_untracked_files_are_working_tree_changes(self):
        state = RepositoryState.from_porcelain(porcelain("?? notes/todo.txt"))
        self.assertEqual(state.working_tree_changes, (FileChange("notes/todo.txt", ChangeStatus.UNTRACKED),))

    def test_ignored_files_are_skipped(self):
        state = RepositoryState.from_porcelain(porcelain("!! build/out.o"))
        self.assertEqual(state.working_tree_changes, ())

    def test_intent_to_add_maps_to_unknown(self):
        state = RepositoryState.from_porcelain(porcelain(" A planned.py"))
        self.assertEqual(state.working_tree_changes, (FileChange("planned.py", ChangeStatus.UNKNOWN),))

    def test_rename_consumes_original_path(self):
        state = RepositoryState.from_porcelain(porcelain("R  new_name.py", "old_name.py", " M other.py"))

        self.assertEqual(
            state.index_changes,
            (FileChange("new_name.py", ChangeStatus.RENAMED, original_path="old_name.py"),),
        )
        self.assertEqual(state.working_tree_changes, (FileChange("other.py", ChangeStatus.MODIFIED),))

    def test_unmerged_paths_are_merge_changes(self):
        state = RepositoryState.from_porcelain(porcelain("UU conflict.py", "AA both_added.py"))

        self.assertEqual(
            [c.path for c in state.merge_changes],
            ["conflict.py", "both_added.py"],
        )
        self.assertEqual(state.index_changes, ())
        self.assertEqual(state.working_tree_changes, ())

    def test_paths_with_spaces(self):
        state = RepositoryState.from_porcelain(porcelain(" M docs/read me.md"))
        self.assertEqual(state.working_tree_changes[0].path, "docs/read me.md")

    def test_generation_is_stamped(self):
        state = RepositoryState.from_porcelain(porcelain(" M a.py"), generation=4)
        self.assertEqual(state.generation, 4)


class TestRepositoryState(unittest.TestCase):
    """Tests for RepositoryState helpers."""

    def test_with_generation(self):
        first = RepositoryState.from_porcelain(porcelain(" M a.py"), generation=1)
        second = first.with_generation(7)

        self.assertEqual(second.generation, 7)
        self.assertEqual(first.generation, 1)
        self.assertEqual([c.path for c in second.working_tree_changes], ["a.py"])

    def test_unstaged_changes_include_merge_changes(self):
        state = RepositoryState.from_porcelain(porcelain(" M a.py", "UU b.py"))
        self.assertEqual([c.path for c in state.unstaged_changes()], ["a.py", "b.py"])

    def test_find_unstaged(self):
        state = RepositoryState.from_porcelain(porcelain("M  staged.py", "?? new.py"))

        self.assertEqual(state.find_unstaged("new.py").status, ChangeStatus.UNTRACKED)
        self.assertIsNone(state.find_unstaged("staged.py"))


if __name__ == "__main__":
    unittest.main()
