"""Wiring shared by the command implementations.

A StagingSession owns one coordinator and one controller for a repository
path and collects the messages they publish.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from hunkstage.domain.config import StagingConfig
from hunkstage.domain.view import ViewMessage
from hunkstage.infrastructure.git.repository import GitRepository, Repository
from hunkstage.infrastructure.git.runner import GitCommandRunner
from hunkstage.infrastructure.output import format_message
from hunkstage.services.refresh_coordinator import RefreshCoordinator
from hunkstage.services.staging_controller import StagingController


@dataclass
class StagingSession:
    """Coordinator, controller and published messages for one command run."""

    repo_path: str
    verbose: bool = False
    on_message: Callable[[ViewMessage], None] | None = None
    messages: list[ViewMessage] = field(default_factory=list)

    def __post_init__(self):
        self.runner = GitCommandRunner(verbose=self.verbose)
        self.coordinator = RefreshCoordinator(self._open_repository, self.publish)
        self.controller = StagingController(self.coordinator, self.publish)

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def publish(self, message: ViewMessage) -> None:
        self.messages.append(message)
        if self.on_message is not None:
            self.on_message(message)

    async def repository(self) -> Repository:
        """Resolve the repository through the coordinator."""
        return await self.coordinator.get_repository()

    async def load_config(self) -> StagingConfig:
        """Load .hunkstage.yml from the repository root."""
        repository = await self.repository()
        return StagingConfig.for_repository(Path(repository.root))

    @property
    def last_update(self) -> ViewMessage | None:
        for message in reversed(self.messages):
            if not message.is_error:
                return message
        return None

    @property
    def errors(self) -> list[ViewMessage]:
        return [m for m in self.messages if m.is_error]

    # --------------------------------------------------------
    # Private Methods
    # --------------------------------------------------------

    async def _open_repository(self) -> Repository:
        return await GitRepository.open(self.repo_path, self.runner)


# ============================================================
# Helpers
# ============================================================


def relative_path(repository: Repository, file_path: str, base: str = ".") -> str:
    """Convert a user-supplied path to a path relative to the repository root.

    Args:
        repository: Resolved repository
        file_path: Absolute path, or a path relative to base
        base: Directory relative paths are resolved against (the --repo path)

    Raises:
        ValueError: If the path is outside the repository
    """
    root = Path(repository.root).resolve()
    full_path = (Path(base) / file_path).resolve()
    try:
        return full_path.relative_to(root).as_posix()
    except ValueError:
        raise ValueError(f"Path is outside the repository: {file_path}")


def print_errors(session: StagingSession, output_format: str = "text") -> None:
    """Print every error the session published to stderr."""
    for message in session.errors:
        print(format_message(message, output_format), file=sys.stderr)
