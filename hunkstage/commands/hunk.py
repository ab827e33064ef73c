"""Hunk commands - stage, unstage or discard a single hunk.

The file's diff is fetched fresh and the hunk is looked up by the index
shown by the diff command.
"""

from __future__ import annotations

import asyncio
import sys

from hunkstage.commands.session import StagingSession, print_errors, relative_path
from hunkstage.infrastructure.git.errors import GitError
from hunkstage.services.change_applier import get_file_diff
from hunkstage.services.staging_controller import ActionKind, StagingAction

_HUNK_VERBS = {
    ActionKind.STAGE_HUNK: "Staged",
    ActionKind.UNSTAGE_HUNK: "Unstaged",
    ActionKind.DISCARD_HUNK: "Discarded",
}


def cmd_hunk(
    kind: ActionKind,
    file_path: str,
    hunk_index: int,
    repo_path: str = ".",
    verbose: bool = False,
) -> int:
    """Execute a hunk command.

    Args:
        kind: STAGE_HUNK, UNSTAGE_HUNK or DISCARD_HUNK
        file_path: File the hunk belongs to
        hunk_index: Index from the diff command
        repo_path: Path inside the repository
        verbose: Echo git commands to stderr

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if kind not in _HUNK_VERBS:
        raise ValueError(f"Not a hunk action: {kind.value}")
    return asyncio.run(_run_hunk(kind, file_path, hunk_index, repo_path, verbose))


async def _run_hunk(
    kind: ActionKind,
    file_path: str,
    hunk_index: int,
    repo_path: str,
    verbose: bool,
) -> int:
    session = StagingSession(repo_path, verbose=verbose)
    staged = kind is ActionKind.UNSTAGE_HUNK
    side = "staged" if staged else "unstaged"

    try:
        repository = await session.repository()
        path = relative_path(repository, file_path, repo_path)
        _, document = await get_file_diff(repository, path, staged)
    except (GitError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        session.coordinator.dispose()
        return 1

    if document is None or document.get_hunk(hunk_index) is None:
        count = len(document.hunks) if document else 0
        print(f"No hunk {hunk_index} in {side} changes of {path} ({count} hunks)", file=sys.stderr)
        session.coordinator.dispose()
        return 1

    ok = await session.controller.handle(StagingAction(kind, path=path, hunk_index=hunk_index))
    session.coordinator.dispose()

    print_errors(session)
    if not ok:
        return 1

    print(f"{_HUNK_VERBS[kind]} hunk {hunk_index} of {path}")
    return 0
