# src/journey/views/base.py

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..core.ports import Snapshot, TaskRepo

logger = logging.getLogger(__name__)


class SnapshotView:
    """
    Base for projections fed by the repository's live query.

    start() subscribes and spawns a watcher task; every snapshot received is
    handed to on_snapshot(). stop() closes the subscription and waits for the
    watcher to finish.
    """

    name = "view"

    def __init__(self, repo: TaskRepo) -> None:
        self._repo = repo
        self._sub = None
        self._watcher: asyncio.Task | None = None
        self.items: Snapshot = ()

    @property
    def running(self) -> bool:
        return self._watcher is not None and not self._watcher.done()

    def on_snapshot(self, snapshot: Snapshot) -> None:
        self.items = snapshot

    def start(self) -> None:
        if self.running:
            return
        self._sub = self._repo.all_items_live(name=self.name)
        # Apply the primed snapshot now; take() marks it seen so the watcher skips it.
        first = self._sub.take()
        if first is not None:
            self.on_snapshot(first)
        self._watcher = asyncio.create_task(self._watch(), name=f"{self.name}-watcher")

    async def _watch(self) -> None:
        assert self._sub is not None
        async for snapshot in self._sub:
            try:
                self.on_snapshot(snapshot)
            except Exception:
                logger.exception("%s failed to apply snapshot", self.name)

    async def settle(self) -> None:
        """Yield to the loop until every published snapshot has been applied."""
        while self._sub is not None and self.running and self._sub.pending():
            await asyncio.sleep(0)

    async def stop(self) -> None:
        if self._sub is not None:
            self._sub.close()
        if self._watcher is not None:
            self._watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._watcher
        self._watcher = None
        self._sub = None
