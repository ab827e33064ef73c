"""Status command - show staged and unstaged files.

Runs one refresh cycle with a forced status re-sync and prints the view.
"""

from __future__ import annotations

import asyncio
import sys

import yaml

from hunkstage.commands.session import StagingSession, print_errors
from hunkstage.infrastructure.git.errors import GitError
from hunkstage.infrastructure.output import format_message


def cmd_status(
    repo_path: str = ".",
    output_format: str | None = None,
    verbose: bool = False,
) -> int:
    """Execute the status command.

    Args:
        repo_path: Path inside the repository
        output_format: "text" or "json" (default: from config)
        verbose: Echo git commands to stderr

    Returns:
        Exit code (0 for success, 1 for error)
    """
    return asyncio.run(_run_status(repo_path, output_format, verbose))


async def _run_status(repo_path: str, output_format: str | None, verbose: bool) -> int:
    session = StagingSession(repo_path, verbose=verbose)
    try:
        config = await session.load_config()
    except (GitError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        session.coordinator.dispose()
        return 1

    output_format = output_format or config.output_format
    await session.coordinator.request_refresh(sync_status=True)
    session.coordinator.dispose()

    print_errors(session, output_format)
    update = session.last_update
    if update is None:
        return 1

    print(format_message(update, output_format))
    return 0
