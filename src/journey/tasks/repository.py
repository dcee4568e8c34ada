# src/journey/tasks/repository.py

from __future__ import annotations

"""
Async single-writer facade over TaskStore.

Every mutation:
- takes the writer lock,
- runs the blocking SQLite call in a worker thread,
- reads the committed table and publishes it to the change stream
  before releasing the lock (so snapshots follow commit order).

Mutations that touch no row (unknown id) publish nothing.
"""

import asyncio
import logging
from collections.abc import Iterable

from .change_stream import ChangeStream, Snapshot, Subscription
from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskRepository:
    def __init__(self, store: TaskStore, stream: ChangeStream | None = None) -> None:
        self._store = store
        self._stream = stream if stream is not None else ChangeStream()
        self._write_lock = asyncio.Lock()

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def stream(self) -> ChangeStream:
        return self._stream

    # ---- reads ----

    async def snapshot(self) -> Snapshot:
        return await asyncio.to_thread(self._store.list_tasks)

    async def max_position(self) -> int | None:
        return await asyncio.to_thread(self._store.max_position)

    async def count(self) -> int:
        return await asyncio.to_thread(self._store.count_tasks)

    def current(self) -> Snapshot:
        """Latest published snapshot; empty until refresh() or the first mutation publishes one."""
        return self._stream.current or ()

    def all_items_live(self, name: str = "subscriber") -> Subscription:
        """
        Live view of the whole table in display order.

        The returned subscription yields the current snapshot right away
        (once refresh() has published one), then one snapshot per committed
        change (bursts may coalesce).
        """
        return self._stream.subscribe(name=name)

    async def refresh(self) -> Snapshot:
        """Re-read the table and publish it (used at startup)."""
        async with self._write_lock:
            snapshot = await asyncio.to_thread(self._store.list_tasks)
            self._stream.publish(snapshot)
            return snapshot

    # ---- writes ----

    async def _publish_locked(self) -> None:
        snapshot = await asyncio.to_thread(self._store.list_tasks)
        self._stream.publish(snapshot)

    async def insert(self, task: Task) -> Task:
        async with self._write_lock:
            stored = await asyncio.to_thread(self._store.insert, task)
            await self._publish_locked()
        logger.debug("insert committed id=%s", stored.id)
        return stored

    async def update(self, task: Task) -> bool:
        async with self._write_lock:
            changed = await asyncio.to_thread(self._store.update, task)
            if changed:
                await self._publish_locked()
        if not changed:
            logger.debug("update ignored, no task id=%s", task.id)
        return changed

    async def update_all(self, tasks: Iterable[Task]) -> int:
        batch = list(tasks)
        async with self._write_lock:
            changed = await asyncio.to_thread(self._store.update_all, batch)
            if changed:
                await self._publish_locked()
        return changed

    async def swap_positions(self, task_id: int, other_id: int) -> bool:
        """Swap two open tasks' positions; refused if either is missing or completed at commit time."""
        async with self._write_lock:
            swapped = await asyncio.to_thread(self._store.swap_positions, task_id, other_id)
            if swapped:
                await self._publish_locked()
        return swapped

    async def delete(self, task: Task) -> bool:
        async with self._write_lock:
            deleted = await asyncio.to_thread(self._store.delete, task)
            if deleted:
                await self._publish_locked()
        if not deleted:
            logger.debug("delete ignored, no task id=%s", task.id)
        return deleted

    def close(self) -> None:
        self._stream.close()
        self._store.close()
