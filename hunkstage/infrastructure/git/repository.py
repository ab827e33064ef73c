"""Repository backends.

Repository is the abstract interface the staging services consume: the
patch-apply, index and restore primitives, diff retrieval, status re-sync,
and change notifications. GitRepository implements it on top of the git CLI.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from hunkstage.domain.status import RepositoryState

from .errors import GitCommandError, GitRepositoryError
from .runner import CommandResult, CommandRunner, GitCommandRunner

StateListener = Callable[[RepositoryState], None]


@dataclass
class Subscription:
    """Handle returned by Repository.subscribe(); dispose() stops notifications."""

    listeners: list[StateListener]
    listener: StateListener
    disposed: bool = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        if self.listener in self.listeners:
            self.listeners.remove(self.listener)


class Repository(ABC):
    """Abstract base class for repository backends.

    Any backend (another VCS, or a fake for tests) only needs to implement
    these primitives. Mutating primitives return a CommandResult and never
    raise on a nonzero exit; interpreting failure is up to the caller.
    """

    root: Path
    _listeners: list[StateListener]
    _state: RepositoryState

    def __init__(self, root: Path):
        self.root = root
        self._listeners = []
        self._state = RepositoryState()

    # --------------------------------------------------------
    # Primitives
    # --------------------------------------------------------

    @abstractmethod
    async def apply_patch(
        self, patch_path: Path, cached: bool = False, reverse: bool = False
    ) -> CommandResult:
        """Apply a patch file to the index (cached) or the working copy."""
        pass

    @abstractmethod
    async def add_to_index(self, paths: list[str] | None = None) -> CommandResult:
        """Stage the given paths, or every change when paths is None."""
        pass

    @abstractmethod
    async def reset_index(self, paths: list[str] | None = None) -> CommandResult:
        """Unstage the given paths, or everything when paths is None."""
        pass

    @abstractmethod
    async def restore_from_head(
        self, path: str, staged: bool = True, worktree: bool = True
    ) -> CommandResult:
        """Restore a path from HEAD into the index and/or working copy."""
        pass

    @abstractmethod
    async def checkout_from_head(self, path: str) -> CommandResult:
        """Legacy-compatible restore of a path from HEAD."""
        pass

    @abstractmethod
    async def get_diff(self, path: str, staged: bool) -> str:
        """Return the diff of a path: index vs HEAD if staged, else working tree vs index."""
        pass

    @abstractmethod
    async def read_status(self) -> RepositoryState:
        """Read the current status from the backend (generation is ignored)."""
        pass

    # --------------------------------------------------------
    # State and Notifications
    # --------------------------------------------------------

    @property
    def state(self) -> RepositoryState:
        """The status snapshot from the last re-sync."""
        return self._state

    async def refresh_status(self) -> RepositoryState:
        """Re-read status and notify listeners.

        Listeners are notified after every re-sync, including one whose file
        lists are unchanged. Each re-sync bumps the state generation, so listeners
        can tell which notifications a given read already covers.

        Returns:
            The current state after the re-sync
        """
        fresh = await self.read_status()
        self._state = fresh.with_generation(self._state.generation + 1)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: StateListener) -> Subscription:
        """Register a callback invoked with the new state after every change."""
        self._listeners.append(listener)
        return Subscription(listeners=self._listeners, listener=listener)


class GitRepository(Repository):
    """Repository backed by the git CLI.

    Use open() to resolve the repository root from any path inside it.
    """

    def __init__(self, root: Path, runner: CommandRunner | None = None):
        super().__init__(root)
        self.runner = runner or GitCommandRunner()

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    async def open(cls, path: str | Path = ".", runner: CommandRunner | None = None) -> GitRepository:
        """Resolve the repository containing a path.

        Args:
            path: Any path inside the working tree
            runner: Command runner (default: GitCommandRunner)

        Returns:
            GitRepository rooted at the top-level directory

        Raises:
            GitRepositoryError: If the path is not inside a git repository
        """
        runner = runner or GitCommandRunner()
        directory = Path(path)
        if not directory.is_dir():
            raise GitRepositoryError(f"Not a directory: {directory}")

        result = await runner.run(["rev-parse", "--show-toplevel"], directory)
        if not result.ok or not result.stdout.strip():
            raise GitRepositoryError(
                f"Not a git repository: {directory}\n"
                "Make sure you're running from within a git repository."
            )
        return cls(Path(result.stdout.strip()), runner)

    # --------------------------------------------------------
    # Primitives
    # --------------------------------------------------------

    async def apply_patch(
        self, patch_path: Path, cached: bool = False, reverse: bool = False
    ) -> CommandResult:
        args = ["apply"]
        if cached:
            args.append("--cached")
        if reverse:
            args.append("--reverse")
        args.append(str(patch_path))
        return await self._git(args)

    async def add_to_index(self, paths: list[str] | None = None) -> CommandResult:
        if paths is None:
            return await self._git(["add", "-A"])
        return await self._git(["add", "--", *paths])

    async def reset_index(self, paths: list[str] | None = None) -> CommandResult:
        if paths is None:
            return await self._git(["reset", "HEAD"])
        return await self._git(["reset", "HEAD", "--", *paths])

    async def restore_from_head(
        self, path: str, staged: bool = True, worktree: bool = True
    ) -> CommandResult:
        args = ["restore", "--source=HEAD"]
        if staged:
            args.append("--staged")
        if worktree:
            args.append("--worktree")
        return await self._git([*args, "--", path])

    async def checkout_from_head(self, path: str) -> CommandResult:
        return await self._git(["checkout", "HEAD", "--", path])

    async def get_diff(self, path: str, staged: bool) -> str:
        args = ["diff", "--no-color", "--no-ext-diff", "--src-prefix=a/", "--dst-prefix=b/"]
        if staged:
            args.append("--cached")
        args.extend(["--", path])
        result = await self._git(args)
        if not result.ok:
            raise GitCommandError(result.diagnostic(f"Failed to compute diff for {path}"), path=path)
        return result.stdout

    async def read_status(self) -> RepositoryState:
        result = await self._git(["status", "--porcelain=v1", "-z", "--untracked-files=all"])
        if not result.ok:
            raise GitCommandError(result.diagnostic("Failed to read repository status"))
        return RepositoryState.from_porcelain(result.stdout)

    # --------------------------------------------------------
    # Private Methods
    # --------------------------------------------------------

    async def _git(self, args: list[str]) -> CommandResult:
        return await self.runner.run(args, self.root)
