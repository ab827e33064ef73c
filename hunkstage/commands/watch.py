"""Watch command - keep the staging view up to date.

Polls the repository status and re-renders whenever it changes. Re-renders
are driven by the repository's change notifications, coalesced by the
refresh coordinator.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime

import yaml

from hunkstage.commands.session import StagingSession, relative_path
from hunkstage.domain.view import Selection, ViewMessage
from hunkstage.infrastructure.git.errors import GitError
from hunkstage.infrastructure.output import format_message
from hunkstage.utils.interactive import print_separator


def cmd_watch(
    repo_path: str = ".",
    interval: float | None = None,
    file_path: str | None = None,
    staged: bool = False,
    output_format: str | None = None,
    verbose: bool = False,
    max_polls: int | None = None,
) -> int:
    """Execute the watch command.

    Args:
        repo_path: Path inside the repository
        interval: Seconds between polls (default: from config)
        file_path: Optional file whose diff is shown with every update
        staged: Show the staged side of file_path
        output_format: "text" or "json" (default: from config)
        verbose: Echo git commands to stderr
        max_polls: Stop after this many polls (default: run until interrupted)

    Returns:
        Exit code (0 for success, 1 for error)

    Raises:
        ValueError: If interval is not positive
    """
    if interval is not None and interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")
    try:
        return asyncio.run(
            _run_watch(repo_path, interval, file_path, staged, output_format, verbose, max_polls)
        )
    except KeyboardInterrupt:
        return 0


async def _run_watch(
    repo_path: str,
    interval: float | None,
    file_path: str | None,
    staged: bool,
    output_format: str | None,
    verbose: bool,
    max_polls: int | None,
) -> int:
    session = StagingSession(repo_path, verbose=verbose)
    try:
        config = await session.load_config()
        repository = await session.repository()
        if file_path:
            path = relative_path(repository, file_path, repo_path)
            session.coordinator.selection = Selection(path, staged)
    except (GitError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        session.coordinator.dispose()
        return 1

    output_format = output_format or config.output_format
    if interval is None:
        interval = config.watch_interval
    last_output = None

    def render(message: ViewMessage) -> None:
        nonlocal last_output
        output = format_message(message, output_format)
        # Every poll re-renders; only print what changed
        if output == last_output:
            return
        last_output = output

        if output_format == "text":
            print_separator(datetime.now().strftime("%H:%M:%S"))
        stream = sys.stderr if message.is_error and output_format == "text" else sys.stdout
        print(output, file=stream, flush=True)

    session.on_message = render

    polls = 0
    try:
        await session.coordinator.request_refresh(sync_status=True)
        while max_polls is None or polls < max_polls:
            await asyncio.sleep(interval)
            polls += 1
            try:
                await repository.refresh_status()
                await session.coordinator.wait_for_pending()
            except GitError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
    finally:
        session.coordinator.dispose()

    return 0
