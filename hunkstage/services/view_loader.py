"""Builds the staging view model from repository state."""

from __future__ import annotations

from hunkstage.domain.view import FileEntry, SelectedFile, Selection, ViewData
from hunkstage.infrastructure.git.repository import Repository
from hunkstage.services.change_applier import get_file_diff


async def load_view_data(repository: Repository, selection: Selection | None) -> ViewData:
    """Load file lists and, if a file is selected, its parsed diff.

    The file lists and the generation come from one status snapshot taken
    before the diff is fetched, so the generation never claims more than
    the view actually reflects.

    Args:
        repository: Repository to read from
        selection: Selected file and side, or None

    Returns:
        ViewData snapshot
    """
    state = repository.state

    staged_files = tuple(FileEntry.from_change(c) for c in state.index_changes)
    unstaged_files = tuple(FileEntry.from_change(c) for c in state.unstaged_changes())

    selected_file = None
    if selection is not None:
        diff, document = await get_file_diff(repository, selection.path, selection.staged)
        selected_file = SelectedFile(
            path=selection.path,
            staged=selection.staged,
            diff=diff,
            hunks=document.hunks if document else (),
        )

    return ViewData(
        staged_files=staged_files,
        unstaged_files=unstaged_files,
        selected_file=selected_file,
        generation=state.generation,
    )
