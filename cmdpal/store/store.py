"""
Command palette store.

The one place palette state lives. UI components read the current snapshot,
subscribe for change notifications, and write through the methods here:

    store = create_store(storage=JsonFileStorage(get_storage_path()))
    unsubscribe = store.subscribe(lambda: render(store.get_state()))
    store.navigate(View(ViewType.CATEGORY, category_id="navigation"))
    store.go_back()
    unsubscribe()

Reads and writes are synchronous and finish their notify pass before
returning. Only loading and saving the recent-commands list suspend, and
saves run as detached background tasks: the in-memory list is updated
immediately and may differ from what is persisted until the save lands.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Coroutine, Mapping
from typing import Any, Optional, Union

from ..config.settings import StoreSettings
from .container import StateContainer
from .navigation import NavigationStack
from .persistence import RecentCommandsPersistence
from .storage import KeyValueStorage, MemoryStorage
from .subscriptions import SubscriptionRegistry
from .types import Listener, Snapshot, StatePatch, SupportsNotify, View

logger = logging.getLogger(__name__)


class CommandStore:
    """State store facade for one palette instance."""

    def __init__(
        self,
        initial: Optional[Snapshot] = None,
        storage: Optional[KeyValueStorage] = None,
        settings: Optional[StoreSettings] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = (settings or StoreSettings()).validate()
        self._subscriptions = SubscriptionRegistry(
            warning_threshold=self.settings.subscriber_warning_threshold,
            critical_threshold=self.settings.subscriber_critical_threshold,
            clock=clock,
        )
        self._container = StateContainer(initial or Snapshot(), self._subscriptions.notify)
        self._navigation = NavigationStack()
        self._persistence = RecentCommandsPersistence(
            storage if storage is not None else MemoryStorage(),
            key=self.settings.storage_key,
            max_items=self.settings.max_recent_commands,
        )
        self._pending: set[asyncio.Task] = set()

    # --- Subscriptions ---

    def subscribe(self, callback: Union[Listener, SupportsNotify]) -> Callable[[], None]:
        """Register for change notifications. Call the result on unmount."""
        return self._subscriptions.subscribe(callback)

    @property
    def subscriptions(self) -> SubscriptionRegistry:
        """The listener registry, exposed for diagnostics."""
        return self._subscriptions

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    # --- State ---

    def get_state(self) -> Snapshot:
        """Current snapshot. Do not mutate it; write through set_state()."""
        return self._container.get()

    def set_state(self, patch: Union[StatePatch, Mapping[str, Any]]) -> None:
        """Shallow-merge `patch` and notify every subscriber once."""
        self._container.set(patch)

    # --- Navigation ---

    def navigate(self, view: Union[View, Mapping[str, Any]]) -> None:
        """Show `view`, remembering the current one for go_back()."""
        if not isinstance(view, View):
            view = View.from_dict(view)
        self.set_state(self._navigation.push(self.get_state(), view))
        logger.debug(f"Navigated to: {view.type.value}")

    def go_back(self) -> bool:
        """Return to the previous view. False (and no notify) if there is none."""
        patch = self._navigation.pop(self.get_state())
        if patch is None:
            logger.debug("Nothing to go back to")
            return False
        self.set_state(patch)
        logger.debug(f"Went back to: {self.get_state().view.type.value}")
        return True

    @property
    def can_go_back(self) -> bool:
        return self._navigation.can_go_back(self.get_state())

    # --- Persistence ---

    @property
    def persistence(self) -> RecentCommandsPersistence:
        return self._persistence

    async def init(self) -> None:
        """Load the persisted recent-commands list into state."""
        recent = await self._persistence.load_recent()
        self.set_state({"recent_commands": recent})
        logger.debug(f"Loaded {len(recent)} recent commands from storage")

    def start_init(self) -> asyncio.Task:
        """Run init() as a detached task; the store stays usable meanwhile."""
        return self._spawn(self.init(), name="cmdpal-init")

    async def add_recent_command(self, command_id: str) -> None:
        """
        Move `command_id` to the front of the recent list.

        State is updated before this returns; the save is scheduled as a
        background task and is not awaited. Use flush() to wait for it.
        """
        current = self.get_state().recent_commands
        updated = [command_id, *(c for c in current if c != command_id)]
        updated = updated[: self.settings.max_recent_commands]

        self.set_state({"recent_commands": updated})
        self._spawn(self._persistence.save_recent(updated), name=f"cmdpal-save:{command_id}")
        logger.debug(f"Remembered command: {command_id}")

    # --- Background tasks ---

    @property
    def pending_tasks(self) -> int:
        """Background loads/saves that have not finished yet."""
        return sum(1 for task in self._pending if not task.done())

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.debug(f"Background task {task.get_name()} was cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Background task {task.get_name()} failed: {error}")

    async def flush(self) -> None:
        """Wait until every pending background load/save has finished."""
        while True:
            pending = [task for task in self._pending if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # --- Diagnostics ---

    def cleanup(self) -> int:
        """
        Drop every subscriber at once. Diagnostics only.

        Returns:
            Number of listeners removed (0 when diagnostics are disabled).
        """
        if not self.settings.diagnostics:
            logger.warning("cleanup() ignored: store diagnostics are disabled")
            return 0
        count = self._subscriptions.clear()
        logger.warning(f"Emergency cleanup: removed {count} listeners")
        return count


def create_store(
    initial: Optional[Snapshot] = None,
    storage: Optional[KeyValueStorage] = None,
    settings: Optional[StoreSettings] = None,
) -> CommandStore:
    """Build a ready-to-use store. Call init() or start_init() afterwards."""
    return CommandStore(initial=initial, storage=storage, settings=settings)
