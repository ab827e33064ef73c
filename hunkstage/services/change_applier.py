"""Change applier service.

Moves changes between the working copy and the index, either one hunk at a
time (through a single-hunk patch and git apply) or one file at a time.
Every successful mutation re-syncs the repository status before returning.
"""

from __future__ import annotations

from pathlib import Path

from hunkstage.domain.diff import DiffDocument, Hunk, build_patch
from hunkstage.domain.status import ChangeStatus
from hunkstage.infrastructure.git.errors import GitApplyError, GitCommandError
from hunkstage.infrastructure.git.repository import Repository
from hunkstage.infrastructure.git.runner import ENCODING, ENCODING_ERRORS, CommandResult

HUNK_PATCH_FILENAME = ".hunkstage-hunk.patch"


async def get_file_diff(
    repository: Repository, file_path: str, staged: bool
) -> tuple[str, DiffDocument | None]:
    """Fetch and parse the diff of one file.

    Args:
        repository: Repository to read from
        file_path: Path relative to the repository root
        staged: True for index vs HEAD, False for working tree vs index

    Returns:
        Tuple of (raw diff text, parsed document or None for an empty diff)
    """
    diff = await repository.get_diff(file_path, staged)
    return diff, DiffDocument.from_diff_content(diff, file_path)


class ChangeApplierService:
    """Service for staging, unstaging and discarding changes.

    Hunk operations write a private patch file at the repository root and
    delete it on every exit path.
    """

    def __init__(self, repository: Repository):
        """Initialize with the repository to operate on.

        Args:
            repository: Repository backend
        """
        self.repository = repository

    # ============================================================
    # Hunk Operations
    # ============================================================

    async def stage_hunk(self, file_path: str, hunk: Hunk, header: str) -> None:
        """Apply one hunk to the index.

        Raises:
            GitApplyError: If git apply rejects the patch
        """
        await self._apply_hunk(
            file_path, hunk, header, cached=True, reverse=False, failure_message="Failed to stage hunk"
        )

    async def unstage_hunk(self, file_path: str, hunk: Hunk, header: str) -> None:
        """Reverse-apply one staged hunk to the index.

        Raises:
            GitApplyError: If git apply rejects the patch
        """
        await self._apply_hunk(
            file_path, hunk, header, cached=True, reverse=True, failure_message="Failed to unstage hunk"
        )

    async def discard_hunk(self, file_path: str, hunk: Hunk, header: str) -> None:
        """Reverse-apply one unstaged hunk to the working copy.

        Raises:
            GitApplyError: If git apply rejects the patch
        """
        await self._apply_hunk(
            file_path, hunk, header, cached=False, reverse=True, failure_message="Failed to discard hunk"
        )

    # ============================================================
    # File Operations
    # ============================================================

    async def stage_file(self, file_path: str) -> None:
        """Stage a whole file."""
        result = await self.repository.add_to_index([file_path])
        self._check(result, "Failed to stage file", file_path)
        await self.repository.refresh_status()

    async def unstage_file(self, file_path: str) -> None:
        """Unstage a whole file."""
        result = await self.repository.reset_index([file_path])
        self._check(result, "Failed to unstage file", file_path)
        await self.repository.refresh_status()

    async def stage_all(self) -> None:
        """Stage every change in the working tree, untracked files included."""
        result = await self.repository.add_to_index()
        self._check(result, "Failed to stage all files")
        await self.repository.refresh_status()

    async def unstage_all(self) -> None:
        """Unstage everything."""
        result = await self.repository.reset_index()
        self._check(result, "Failed to unstage all files")
        await self.repository.refresh_status()

    async def discard_file(self, file_path: str, status: ChangeStatus) -> None:
        """Discard all changes to a file.

        Untracked files are deleted since there is no committed version to
        go back to. Anything else is restored from HEAD in both the index
        and the working copy, falling back to git checkout for older git
        versions without git restore.

        Args:
            file_path: Path relative to the repository root
            status: The file's current change status

        Raises:
            GitCommandError: If both the restore and the checkout fallback fail
        """
        if status.is_untracked:
            full_path = self.repository.root / file_path
            if full_path.exists():
                full_path.unlink()
        else:
            result = await self.repository.restore_from_head(file_path, staged=True, worktree=True)
            if not result.ok:
                fallback = await self.repository.checkout_from_head(file_path)
                if not fallback.ok:
                    raise GitCommandError(result.diagnostic("Failed to discard file"), path=file_path)

        await self.repository.refresh_status()

    # ============================================================
    # Diff Retrieval
    # ============================================================

    async def get_file_diff(self, file_path: str, staged: bool) -> tuple[str, DiffDocument | None]:
        """Fetch and parse the staged or unstaged diff of a file."""
        return await get_file_diff(self.repository, file_path, staged)

    # ============================================================
    # Private Methods
    # ============================================================

    async def _apply_hunk(
        self,
        file_path: str,
        hunk: Hunk,
        header: str,
        cached: bool,
        reverse: bool,
        failure_message: str,
    ) -> None:
        patch = build_patch(header, [hunk])
        patch_path = self.repository.root / HUNK_PATCH_FILENAME
        _write_patch(patch_path, patch)

        try:
            result = await self.repository.apply_patch(patch_path, cached=cached, reverse=reverse)
            if not result.ok:
                raise GitApplyError(result.diagnostic(failure_message), path=file_path)
        finally:
            patch_path.unlink(missing_ok=True)

        await self.repository.refresh_status()

    @staticmethod
    def _check(result: CommandResult, failure_message: str, file_path: str | None = None) -> None:
        if not result.ok:
            raise GitCommandError(result.diagnostic(failure_message), path=file_path)


def _write_patch(patch_path: Path, patch: str) -> None:
    # newline="" keeps \n line endings on every platform
    with open(patch_path, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
        f.write(patch)
