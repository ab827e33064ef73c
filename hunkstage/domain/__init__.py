"""Domain models for hunkstage."""

from hunkstage.domain.config import StagingConfig
from hunkstage.domain.diff import DiffDocument, Hunk, HunkRange, build_patch
from hunkstage.domain.status import ChangeStatus, FileChange, RepositoryState
from hunkstage.domain.view import (
    FileEntry,
    MessageKind,
    SelectedFile,
    Selection,
    ViewData,
    ViewMessage,
)

__all__ = [
    "ChangeStatus",
    "DiffDocument",
    "FileChange",
    "FileEntry",
    "Hunk",
    "HunkRange",
    "MessageKind",
    "RepositoryState",
    "SelectedFile",
    "Selection",
    "StagingConfig",
    "ViewData",
    "ViewMessage",
    "build_patch",
]
