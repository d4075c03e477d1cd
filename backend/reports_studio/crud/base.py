# backend/reports_studio/crud/base.py
import asyncio
import logging
from typing import Any, Generic, List, Optional, TypeVar

from reports_studio.core.observable import Observable
from reports_studio.crud.crud_store import KeyValueStore

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT")


class PersistedRepository(Observable[StateT], Generic[StateT]):
    """
    An in-memory singleton backed by one key of a :class:`KeyValueStore`.

    Mutations replace ``state`` synchronously, notify subscribers and then
    write through to the store. When called from inside a running event loop
    the write is scheduled as a task; otherwise the repository is marked dirty
    and written on the next ``flush()``.
    """

    key: str = ""
    envelope_field: str = ""
    schema_version: int = 1

    def __init__(self, store: KeyValueStore):
        super().__init__()
        self.store = store
        self._state: StateT = self.initial_state()
        self._dirty = False
        self._pending: List[asyncio.Task] = []
        self._save_lock: Optional[asyncio.Lock] = None
        self._save_lock_loop: Optional[asyncio.AbstractEventLoop] = None

    # --- hooks for subclasses ---
    def initial_state(self) -> StateT:
        raise NotImplementedError

    def decode(self, payload: Any) -> StateT:
        """Turn the stored payload back into state; drifted records are dropped here."""
        raise NotImplementedError

    def encode(self, state: StateT) -> Any:
        raise NotImplementedError

    # --- lifecycle ---
    @property
    def state(self) -> StateT:
        return self._state

    async def load(self) -> StateT:
        envelope = await self.store.read(self.key)
        payload = envelope.get(self.envelope_field) if isinstance(envelope, dict) else None
        if payload is None:
            logger.info(f"No stored value under '{self.key}', using initial state.")
            self._state = self.initial_state()
        else:
            self._state = self.decode(payload)
        self._dirty = False
        self._notify(self._state)
        return self._state

    def _lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._save_lock is None or self._save_lock_loop is not loop:
            self._save_lock, self._save_lock_loop = asyncio.Lock(), loop
        return self._save_lock

    async def save(self) -> None:
        """Write the current state. Saves of one repository run one at a time, in order."""
        async with self._lock():
            self._dirty = False
            await self.store.write(
                self.key, {self.envelope_field: self.encode(self._state)}, schema_version=self.schema_version
            )

    async def flush(self) -> None:
        pending, self._pending = self._pending, []
        loop = asyncio.get_running_loop()
        # Saves scheduled on another (finished) loop cannot be awaited here
        if any(task.get_loop() is not loop for task in pending):
            self._dirty = True
        pending = [task for task in pending if task.get_loop() is loop]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        if self._dirty:
            await self.save()

    def _commit(self, state: StateT) -> StateT:
        self._state = state
        self._notify(state)
        self._schedule_save()
        return state

    def _schedule_save(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is None:
            self._dirty = True
            return
        task = loop.create_task(self.save())
        self._pending = [t for t in self._pending if not t.done()]
        self._pending.append(task)
        task.add_done_callback(self._log_save_failure)

    def _log_save_failure(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._dirty = True
            logger.error(f"Failed to persist '{self.key}': {exc}")
