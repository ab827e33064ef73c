"""Exceptions raised by git infrastructure and staging services."""

from __future__ import annotations


class GitError(Exception):
    """Base class for git failures."""

    pass


class GitRepositoryError(GitError):
    """Raised when no git repository can be resolved for a path."""

    pass


class GitCommandError(GitError):
    """Raised when a git command exits with a nonzero status."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class GitApplyError(GitCommandError):
    """Raised when git apply rejects a hunk patch."""

    pass
