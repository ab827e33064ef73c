"""Git command runner.

Infrastructure component that wraps subprocess calls to the git CLI.
This abstraction allows the repository backend to be tested without
actually calling git.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import GitRepositoryError

# Diff text is round-tripped through patch files, so undecodable bytes must survive
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of a git command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def diagnostic(self, default: str) -> str:
        """Return git's error text, or a default message if it printed none."""
        return self.stderr.strip() or default


class CommandRunner(Protocol):
    """Protocol for running git commands."""

    async def run(self, args: list[str], cwd: Path) -> CommandResult:
        """Run git with the given arguments and return its result."""
        ...


@dataclass
class GitCommandRunner:
    """Runs git commands via asyncio subprocesses.

    This is the production implementation of CommandRunner.
    For testing, mock this class or use a fake implementation.
    """

    git_executable: str = "git"
    verbose: bool = False

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    async def run(self, args: list[str], cwd: Path) -> CommandResult:
        """Run a git command.

        Args:
            args: Git arguments (without the executable), e.g. ["apply", "--cached", "x.patch"]
            cwd: Working directory for the command

        Returns:
            CommandResult with exit code and decoded output

        Raises:
            GitRepositoryError: If the git executable or the directory does not exist
        """
        cmd = [self.git_executable, *args]
        if self.verbose:
            print(f"$ {' '.join(cmd)}", file=sys.stderr)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise GitRepositoryError(f"Cannot run {self.git_executable} in {cwd}: {e}")

        stdout, stderr = await process.communicate()
        result = CommandResult(
            returncode=process.returncode,
            stdout=stdout.decode(ENCODING, errors=ENCODING_ERRORS),
            stderr=stderr.decode(ENCODING, errors=ENCODING_ERRORS),
        )

        if not result.ok and self.verbose:
            print(f"Command failed: {result.stderr.strip()}", file=sys.stderr)

        return result
