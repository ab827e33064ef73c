"""Services for hunkstage.

Services encapsulate staging logic and orchestrate domain models.
They receive dependencies via constructor injection.
"""

from hunkstage.services.change_applier import (
    HUNK_PATCH_FILENAME,
    ChangeApplierService,
    get_file_diff,
)
from hunkstage.services.refresh_coordinator import RefreshCoordinator, RefreshState
from hunkstage.services.staging_controller import (
    ActionKind,
    StagingAction,
    StagingController,
)
from hunkstage.services.view_loader import load_view_data

__all__ = [
    "HUNK_PATCH_FILENAME",
    "ActionKind",
    "ChangeApplierService",
    "RefreshCoordinator",
    "RefreshState",
    "StagingAction",
    "StagingController",
    "get_file_diff",
    "load_view_data",
]
