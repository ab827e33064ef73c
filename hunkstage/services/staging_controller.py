"""Staging controller.

Dispatches user actions from the host UI (stage a file, discard a hunk,
select a file, ...) to the change applier and the refresh coordinator.
This is the operation boundary: failures are turned into error messages
for the host instead of propagating.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from hunkstage.domain.status import ChangeStatus
from hunkstage.domain.view import Selection, ViewMessage
from hunkstage.infrastructure.git.errors import GitError
from hunkstage.services.change_applier import ChangeApplierService
from hunkstage.services.refresh_coordinator import Publisher, RefreshCoordinator


# ============================================================
# Domain Models
# ============================================================


class ActionKind(Enum):
    """User actions the staging view can send."""

    STAGE_FILE = "stage_file"
    UNSTAGE_FILE = "unstage_file"
    STAGE_ALL = "stage_all"
    UNSTAGE_ALL = "unstage_all"
    DISCARD_FILE = "discard_file"
    STAGE_HUNK = "stage_hunk"
    UNSTAGE_HUNK = "unstage_hunk"
    DISCARD_HUNK = "discard_hunk"
    SELECT_FILE = "select_file"
    REFRESH = "refresh"


@dataclass(frozen=True)
class StagingAction:
    """A user action.

    Attributes:
        kind: What to do
        path: File path relative to the repository root (file and hunk actions)
        hunk_index: Index of the hunk in a fresh parse of the file's diff
        status: Change status of the file (discard_file)
        staged: Which side to show (select_file)
    """

    kind: ActionKind
    path: str | None = None
    hunk_index: int | None = None
    status: ChangeStatus | None = None
    staged: bool = False

    def __post_init__(self):
        if self.kind in _PATH_ACTIONS and not self.path:
            raise ValueError(f"{self.kind.value} requires a path")
        if self.kind in _HUNK_ACTIONS and self.hunk_index is None:
            raise ValueError(f"{self.kind.value} requires a hunk index")
        if self.kind is ActionKind.DISCARD_FILE and self.status is None:
            raise ValueError("discard_file requires a status")


_HUNK_ACTIONS = {ActionKind.STAGE_HUNK, ActionKind.UNSTAGE_HUNK, ActionKind.DISCARD_HUNK}
_PATH_ACTIONS = _HUNK_ACTIONS | {
    ActionKind.STAGE_FILE,
    ActionKind.UNSTAGE_FILE,
    ActionKind.DISCARD_FILE,
    ActionKind.SELECT_FILE,
}


# ============================================================
# Controller
# ============================================================


class StagingController:
    """Handles staging actions against one coordinator.

    The coordinator owns the repository handle and the current selection;
    the controller mutates through ChangeApplierService and then requests
    a refresh.
    """

    def __init__(self, coordinator: RefreshCoordinator, publish: Publisher):
        """Initialize with the coordinator and the host's message sink.

        Args:
            coordinator: Refresh coordinator for the staging view
            publish: Receives error messages for failed actions
        """
        self.coordinator = coordinator
        self._publish = publish

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    async def handle(self, action: StagingAction) -> bool:
        """Run an action, reporting failures to the host.

        Args:
            action: The action to run

        Returns:
            True if the action completed, False if it failed
        """
        try:
            await self._dispatch(action)
        except (GitError, OSError) as e:
            self._publish(ViewMessage.error(str(e), action=action.kind.value))
            return False
        return True

    # --------------------------------------------------------
    # Private Methods
    # --------------------------------------------------------

    async def _dispatch(self, action: StagingAction) -> None:
        repository = await self.coordinator.get_repository()
        applier = ChangeApplierService(repository)
        kind = action.kind

        if kind is ActionKind.STAGE_FILE:
            await applier.stage_file(action.path)
        elif kind is ActionKind.UNSTAGE_FILE:
            await applier.unstage_file(action.path)
        elif kind is ActionKind.STAGE_ALL:
            await applier.stage_all()
        elif kind is ActionKind.UNSTAGE_ALL:
            await applier.unstage_all()
        elif kind is ActionKind.DISCARD_FILE:
            await applier.discard_file(action.path, action.status)
            self.coordinator.selection = None
        elif kind in _HUNK_ACTIONS:
            if not await self._apply_hunk_action(applier, action):
                return
        elif kind is ActionKind.SELECT_FILE:
            self.coordinator.selection = Selection(action.path, action.staged)

        await self.coordinator.request_refresh()

    async def _apply_hunk_action(self, applier: ChangeApplierService, action: StagingAction) -> bool:
        # Unstaging works on the staged diff; staging and discarding on the unstaged one
        staged = action.kind is ActionKind.UNSTAGE_HUNK
        _, document = await applier.get_file_diff(action.path, staged)
        hunk = document.get_hunk(action.hunk_index) if document else None
        if hunk is None:
            return False

        if action.kind is ActionKind.STAGE_HUNK:
            await applier.stage_hunk(action.path, hunk, document.header)
        elif action.kind is ActionKind.UNSTAGE_HUNK:
            await applier.unstage_hunk(action.path, hunk, document.header)
        else:
            await applier.discard_hunk(action.path, hunk, document.header)

        self.coordinator.selection = Selection(action.path, staged)
        return True
