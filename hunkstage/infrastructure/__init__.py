"""Infrastructure components for hunkstage.

This layer handles external system interactions:
- git CLI via asyncio subprocesses
- Repository status and change notifications

Organized into subdirectories:
- git/ - Git primitives (command runner, repository backend, errors)
"""

from .git import (
    CommandResult,
    GitApplyError,
    GitCommandError,
    GitCommandRunner,
    GitError,
    GitRepository,
    GitRepositoryError,
    Repository,
)

__all__ = [
    "CommandResult",
    "GitApplyError",
    "GitCommandError",
    "GitCommandRunner",
    "GitError",
    "GitRepository",
    "GitRepositoryError",
    "Repository",
]
