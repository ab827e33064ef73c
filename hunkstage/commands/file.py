"""File commands - stage, unstage or discard whole files.

stage-all and unstage-all act on every change in the repository.
"""

from __future__ import annotations

import asyncio
import sys

import yaml

from hunkstage.commands.session import StagingSession, print_errors, relative_path
from hunkstage.infrastructure.git.errors import GitError
from hunkstage.services.staging_controller import ActionKind, StagingAction
from hunkstage.utils.interactive import confirm

_FILE_VERBS = {
    ActionKind.STAGE_FILE: "Staged",
    ActionKind.UNSTAGE_FILE: "Unstaged",
    ActionKind.DISCARD_FILE: "Discarded changes to",
    ActionKind.STAGE_ALL: "Staged all changes",
    ActionKind.UNSTAGE_ALL: "Unstaged all changes",
}


def cmd_file(
    kind: ActionKind,
    file_path: str | None = None,
    repo_path: str = ".",
    assume_yes: bool = False,
    verbose: bool = False,
) -> int:
    """Execute a file-level command.

    Args:
        kind: STAGE_FILE, UNSTAGE_FILE, DISCARD_FILE, STAGE_ALL or UNSTAGE_ALL
        file_path: Target file (not used by stage-all and unstage-all)
        repo_path: Path inside the repository
        assume_yes: Skip the discard confirmation
        verbose: Echo git commands to stderr

    Returns:
        Exit code (0 for success, 1 for error or when the user declines)
    """
    if kind not in _FILE_VERBS:
        raise ValueError(f"Not a file action: {kind.value}")
    return asyncio.run(_run_file(kind, file_path, repo_path, assume_yes, verbose))


async def _run_file(
    kind: ActionKind,
    file_path: str | None,
    repo_path: str,
    assume_yes: bool,
    verbose: bool,
) -> int:
    session = StagingSession(repo_path, verbose=verbose)
    try:
        action = await _build_action(session, kind, file_path, repo_path, assume_yes)
    except (GitError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        session.coordinator.dispose()
        return 1

    if action is None:
        session.coordinator.dispose()
        return 1

    ok = await session.controller.handle(action)
    session.coordinator.dispose()

    print_errors(session)
    if not ok:
        return 1

    if action.path:
        print(f"{_FILE_VERBS[kind]} {action.path}")
    else:
        print(_FILE_VERBS[kind])
    return 0


async def _build_action(
    session: StagingSession,
    kind: ActionKind,
    file_path: str | None,
    repo_path: str,
    assume_yes: bool,
) -> StagingAction | None:
    if kind in (ActionKind.STAGE_ALL, ActionKind.UNSTAGE_ALL):
        return StagingAction(kind)

    if not file_path:
        raise ValueError(f"{kind.value} requires a file path")

    repository = await session.repository()
    path = relative_path(repository, file_path, repo_path)
    if kind is not ActionKind.DISCARD_FILE:
        return StagingAction(kind, path=path)

    # Discard needs the current status to tell untracked files apart
    state = await repository.refresh_status()
    change = state.find_unstaged(path) or next(
        (c for c in state.index_changes if c.path == path), None
    )
    if change is None:
        print(f"No changes to discard in {path}", file=sys.stderr)
        return None

    config = await session.load_config()
    if config.confirm_discard and not assume_yes:
        if not confirm(f"Discard all changes to {path}? This cannot be undone."):
            print("Aborted")
            return None

    return StagingAction(kind, path=path, status=change.status)
