"""Refresh coordinator.

Single-flight, coalescing scheduler for re-reading repository state. At
most one refresh cycle runs at a time; requests arriving during a cycle are
folded into a single pending request that runs as soon as the current
cycle finishes.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Awaitable, Callable

from hunkstage.domain.status import RepositoryState
from hunkstage.domain.view import Selection, ViewData, ViewMessage
from hunkstage.infrastructure.git.repository import Repository, Subscription
from hunkstage.services.view_loader import load_view_data

RepositoryProvider = Callable[[], Awaitable[Repository]]
ViewLoader = Callable[[Repository, "Selection | None"], Awaitable[ViewData]]
Publisher = Callable[[ViewMessage], None]


class RefreshState(Enum):
    """Coordinator states."""

    IDLE = "idle"
    RUNNING = "running"
    RUNNING_WITH_PENDING = "running_with_pending"


class RefreshCoordinator:
    """Serializes and de-duplicates refreshes of the staging view.

    A refresh cycle optionally re-syncs the repository status, loads the
    view model and publishes it (or an error message). Requests made while
    a cycle is running set a depth-1 pending slot whose sync flag is the OR
    of every coalesced request.

    Change notifications from the repository carry the state generation.
    A notification whose generation is already covered by the last
    published view is ignored, which is how the coordinator's own status
    re-sync avoids re-triggering itself.
    """

    def __init__(
        self,
        repository_provider: RepositoryProvider,
        publish: Publisher,
        view_loader: ViewLoader = load_view_data,
    ):
        """Initialize the coordinator.

        Args:
            repository_provider: Coroutine function resolving the repository
            publish: Receives every update or error message
            view_loader: Coroutine function building the view model
        """
        self._repository_provider = repository_provider
        self._publish = publish
        self._view_loader = view_loader

        self.selection: Selection | None = None

        self._repository: Repository | None = None
        self._subscription: Subscription | None = None
        self._state = RefreshState.IDLE
        self._pending_explicit = False
        self._pending_sync_status = False
        self._notified_generation = -1
        self._rendered_generation = -1
        self._background_tasks: set[asyncio.Task] = set()

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def state(self) -> RefreshState:
        return self._state

    async def get_repository(self) -> Repository:
        """Resolve the repository, subscribing to its change notifications.

        Raises:
            GitRepositoryError: If no repository can be resolved
        """
        repository = self._repository or await self._repository_provider()
        if repository is not self._repository:
            if self._subscription is not None:
                self._subscription.dispose()
            self._repository = repository
            self._subscription = repository.subscribe(self._on_state_change)
        return repository

    async def request_refresh(self, sync_status: bool = False) -> None:
        """Request a refresh of the view.

        Returns immediately when a cycle is already running; the request is
        then absorbed into the pending slot. Otherwise runs cycles until no
        request is pending.

        Args:
            sync_status: Force a repository status re-sync before reading
        """
        if self._state is not RefreshState.IDLE:
            self._state = RefreshState.RUNNING_WITH_PENDING
            self._pending_explicit = True
            self._pending_sync_status = self._pending_sync_status or sync_status
            return

        next_sync_status = sync_status
        try:
            while True:
                self._state = RefreshState.RUNNING
                self._pending_explicit = False
                self._pending_sync_status = False

                await self._run_cycle(next_sync_status)

                next_sync_status = self._pending_sync_status
                if not self._has_pending_request():
                    break
        finally:
            self._state = RefreshState.IDLE

    async def wait_for_pending(self) -> None:
        """Wait until refreshes triggered by change notifications have finished."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks))

    def dispose(self) -> None:
        """Stop listening to repository change notifications."""
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

    # --------------------------------------------------------
    # Private Methods
    # --------------------------------------------------------

    async def _run_cycle(self, sync_status: bool) -> None:
        try:
            repository = await self.get_repository()
            if sync_status:
                await repository.refresh_status()
            data = await self._view_loader(repository, self.selection)
        except Exception as e:
            self._publish(ViewMessage.error(str(e) or type(e).__name__))
            return

        self._rendered_generation = max(self._rendered_generation, data.generation)
        self._publish(ViewMessage.update(data))

    def _has_pending_request(self) -> bool:
        if self._state is not RefreshState.RUNNING_WITH_PENDING:
            return False
        return self._pending_explicit or self._notified_generation > self._rendered_generation

    def _absorb_change(self, generation: int) -> bool:
        """Fold a change notification into the running cycle, if any.

        Returns:
            True if nothing else needs to be done for this notification
        """
        if generation <= self._rendered_generation:
            return True
        if self._state is RefreshState.IDLE:
            return False
        self._notified_generation = max(self._notified_generation, generation)
        self._state = RefreshState.RUNNING_WITH_PENDING
        return True

    def _on_state_change(self, state: RepositoryState) -> None:
        if self._absorb_change(state.generation):
            return
        task = asyncio.get_running_loop().create_task(self._refresh_after_change(state.generation))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _refresh_after_change(self, generation: int) -> None:
        # A cycle may have started or finished since the notification was queued
        if self._absorb_change(generation):
            return
        await self.request_refresh(False)
