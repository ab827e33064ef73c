"""Diff command - show the hunks of one file.

Hunk indices printed here are what the stage-hunk, unstage-hunk and
discard-hunk commands take.
"""

from __future__ import annotations

import asyncio
import sys

import yaml

from hunkstage.commands.session import StagingSession, relative_path
from hunkstage.infrastructure.git.errors import GitError
from hunkstage.infrastructure.output import format_document_as_json, format_document_as_text
from hunkstage.services.change_applier import ChangeApplierService


def cmd_diff(
    file_path: str,
    staged: bool = False,
    repo_path: str = ".",
    output_format: str | None = None,
    verbose: bool = False,
) -> int:
    """Execute the diff command.

    Args:
        file_path: File to show, relative to repo_path or absolute
        staged: Show the staged diff (index vs HEAD) instead of the unstaged one
        repo_path: Path inside the repository
        output_format: "text" or "json" (default: from config)
        verbose: Echo git commands to stderr

    Returns:
        Exit code (0 for success, 1 for error)
    """
    return asyncio.run(_run_diff(file_path, staged, repo_path, output_format, verbose))


async def _run_diff(
    file_path: str,
    staged: bool,
    repo_path: str,
    output_format: str | None,
    verbose: bool,
) -> int:
    session = StagingSession(repo_path, verbose=verbose)
    try:
        config = await session.load_config()
        repository = await session.repository()
        path = relative_path(repository, file_path, repo_path)
        _, document = await ChangeApplierService(repository).get_file_diff(path, staged)
    except (GitError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        session.coordinator.dispose()

    if (output_format or config.output_format) == "json":
        print(format_document_as_json(document, path))
    else:
        print(format_document_as_text(document, path))
    return 0
