"""Git primitives - command runner, repository backend and errors."""

from .errors import GitApplyError, GitCommandError, GitError, GitRepositoryError
from .repository import GitRepository, Repository, StateListener, Subscription
from .runner import CommandResult, CommandRunner, GitCommandRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "GitApplyError",
    "GitCommandError",
    "GitCommandRunner",
    "GitError",
    "GitRepository",
    "GitRepositoryError",
    "Repository",
    "StateListener",
    "Subscription",
]
