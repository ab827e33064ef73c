"""Domain models for repository status.

Parses `git status --porcelain=v1 -z` output into typed change lists,
split the way a staging panel shows them: index changes, working tree
changes, and unmerged (merge) changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

UNMERGED_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}


# ============================================================
# Domain Models
# ============================================================


class ChangeStatus(Enum):
    """Single-letter change status shown next to a file."""

    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    UNTRACKED = "U"
    UNKNOWN = "?"

    @classmethod
    def from_code(cls, value: str) -> ChangeStatus:
        """Parse a status letter, mapping anything unrecognized to UNKNOWN.

        Examples:
            >>> ChangeStatus.from_code("U")
            <ChangeStatus.UNTRACKED: 'U'>
            >>> ChangeStatus.from_code("x")
            <ChangeStatus.UNKNOWN: '?'>
        """
        for member in cls:
            if member.value == value:
                return member
        return cls.UNKNOWN

    @property
    def is_untracked(self) -> bool:
        """Untracked files have no committed version to restore."""
        return self is ChangeStatus.UNTRACKED


# Porcelain X (index) column -> status
_INDEX_STATUS = {
    "M": ChangeStatus.MODIFIED,
    "T": ChangeStatus.MODIFIED,
    "A": ChangeStatus.ADDED,
    "D": ChangeStatus.DELETED,
    "R": ChangeStatus.RENAMED,
    "C": ChangeStatus.COPIED,
}

# Porcelain Y (working tree) column -> status; " A" is intent-to-add
_WORKTREE_STATUS = {
    "M": ChangeStatus.MODIFIED,
    "T": ChangeStatus.MODIFIED,
    "D": ChangeStatus.DELETED,
    "A": ChangeStatus.UNKNOWN,
}


@dataclass(frozen=True)
class FileChange:
    """A changed file, relative to the repository root."""

    path: str
    status: ChangeStatus
    original_path: str | None = None

    def to_dict(self) -> dict:
        return {"path": self.path, "status": self.status.value}


@dataclass(frozen=True)
class RepositoryState:
    """Snapshot of the repository status at one point in time.

    Attributes:
        index_changes: Changes staged in the index (index vs HEAD)
        working_tree_changes: Unstaged changes, untracked files included
        merge_changes: Unmerged paths
        generation: Counter bumped by every status re-sync
    """

    index_changes: tuple[FileChange, ...] = ()
    working_tree_changes: tuple[FileChange, ...] = ()
    merge_changes: tuple[FileChange, ...] = ()
    generation: int = 0

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_porcelain(cls, output: str, generation: int = 0) -> RepositoryState:
        """Parse NUL-separated porcelain v1 status output.

        Args:
            output: Output of git status --porcelain=v1 -z
            generation: Generation number to stamp on the snapshot

        Returns:
            RepositoryState with changes in porcelain order
        """
        index_changes: list[FileChange] = []
        working_tree_changes: list[FileChange] = []
        merge_changes: list[FileChange] = []

        entries = output.split("\0")
        i = 0
        while i < len(entries):
            entry = entries[i]
            i += 1
            if len(entry) < 4:
                continue

            code, path = entry[:2], entry[3:]
            x, y = code[0], code[1]

            original_path = None
            if x in ("R", "C") and i < len(entries):
                # Renames and copies carry the source path as the next entry
                original_path = entries[i]
                i += 1

            if code == "??":
                working_tree_changes.append(FileChange(path, ChangeStatus.UNTRACKED))
                continue
            if code == "!!":
                continue
            if code in UNMERGED_CODES:
                merge_changes.append(FileChange(path, ChangeStatus.UNKNOWN))
                continue

            if x in _INDEX_STATUS:
                index_changes.append(FileChange(path, _INDEX_STATUS[x], original_path))
            if y in _WORKTREE_STATUS:
                working_tree_changes.append(FileChange(path, _WORKTREE_STATUS[y]))

        return cls(
            index_changes=tuple(index_changes),
            working_tree_changes=tuple(working_tree_changes),
            merge_changes=tuple(merge_changes),
            generation=generation,
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def with_generation(self, generation: int) -> RepositoryState:
        return RepositoryState(
            index_changes=self.index_changes,
            working_tree_changes=self.working_tree_changes,
            merge_changes=self.merge_changes,
            generation=generation,
        )

    def unstaged_changes(self) -> tuple[FileChange, ...]:
        """Working tree changes followed by merge changes."""
        return self.working_tree_changes + self.merge_changes

    def find_unstaged(self, path: str) -> FileChange | None:
        """Find the unstaged change for a path, if any."""
        for change in self.unstaged_changes():
            if change.path == path:
                return change
        return None
