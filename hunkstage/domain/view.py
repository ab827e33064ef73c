"""View models published to the host UI.

The coordinator publishes ViewMessage instances: either an update with a
full ViewData snapshot, or an error with a message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from hunkstage.domain.diff import Hunk
from hunkstage.domain.status import FileChange


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class Selection:
    """The file currently shown in the diff pane, and on which side."""

    path: str
    staged: bool


@dataclass(frozen=True)
class FileEntry:
    """A row in the staged or unstaged file list."""

    path: str
    status: str

    @classmethod
    def from_change(cls, change: FileChange) -> FileEntry:
        return cls(path=change.path, status=change.status.value)

    def to_dict(self) -> dict:
        return {"path": self.path, "status": self.status}


@dataclass(frozen=True)
class SelectedFile:
    """Diff of the selected file, split into hunks."""

    path: str
    staged: bool
    diff: str
    hunks: tuple[Hunk, ...] = ()

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "staged": self.staged,
            "diff": self.diff,
            "hunks": [hunk.to_dict() for hunk in self.hunks],
        }


@dataclass(frozen=True)
class ViewData:
    """Everything the staging view renders."""

    staged_files: tuple[FileEntry, ...] = ()
    unstaged_files: tuple[FileEntry, ...] = ()
    selected_file: SelectedFile | None = None
    generation: int = 0

    def to_dict(self) -> dict:
        return {
            "staged_files": [entry.to_dict() for entry in self.staged_files],
            "unstaged_files": [entry.to_dict() for entry in self.unstaged_files],
            "selected_file": self.selected_file.to_dict() if self.selected_file else None,
        }


class MessageKind(Enum):
    """Kind of message sent to the host UI."""

    UPDATE = "update"
    ERROR = "error"


@dataclass(frozen=True)
class ViewMessage:
    """A message for the host UI: a view update or an error."""

    kind: MessageKind
    data: ViewData | None = None
    message: str = ""
    details: dict = field(default_factory=dict)

    @classmethod
    def update(cls, data: ViewData) -> ViewMessage:
        return cls(kind=MessageKind.UPDATE, data=data)

    @classmethod
    def error(cls, message: str, **details) -> ViewMessage:
        return cls(kind=MessageKind.ERROR, message=message, details=details)

    @property
    def is_error(self) -> bool:
        return self.kind is MessageKind.ERROR

    def to_dict(self) -> dict:
        if self.is_error:
            return {"type": self.kind.value, "message": self.message, **self.details}
        return {"type": self.kind.value, "data": self.data.to_dict() if self.data else None}
