# src/journey/tasks/change_stream.py

from __future__ import annotations

"""
Change stream: pushes the full sorted task list to every active observer.

Each Subscription keeps only the latest snapshot plus an asyncio.Event, so
publishing never waits on a slow observer. Bursts coalesce: an observer that
falls behind simply sees the newest snapshot next.
"""

import asyncio
import logging
from collections.abc import Callable

from .task_models import Task

logger = logging.getLogger(__name__)

Snapshot = tuple[Task, ...]
SnapshotListener = Callable[[Snapshot], None]


class Subscription:
    """Async iterator over snapshots. Use `async for snapshot in sub: ...`."""

    def __init__(self, stream: ChangeStream, name: str = "subscriber") -> None:
        self._stream = stream
        self.name = name
        self._latest: Snapshot | None = None
        self._event = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _offer(self, snapshot: Snapshot) -> None:
        if self._closed:
            return
        self._latest = snapshot
        self._event.set()

    def pending(self) -> bool:
        return self._event.is_set()

    def latest(self) -> Snapshot | None:
        return self._latest

    def take(self) -> Snapshot | None:
        """Return the latest snapshot and mark it seen, without waiting."""
        self._event.clear()
        return self._latest

    async def next(self) -> Snapshot:
        """Wait for the next snapshot not yet seen by this subscriber."""
        while True:
            if self._closed:
                raise StopAsyncIteration
            await self._event.wait()
            if self._closed:
                raise StopAsyncIteration
            self._event.clear()
            if self._latest is not None:
                return self._latest

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Wake up a pending next() so it can stop.
        self._event.set()
        self._stream._remove(self)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> Snapshot:
        return await self.next()


class ChangeStream:
    """
    Observer list for task snapshots.

    - publish(snapshot) stores it as current and offers it to everyone
    - subscribe() returns a Subscription already primed with the current snapshot
    - add_listener(cb) registers a plain callback called on every publish
    """

    def __init__(self) -> None:
        self._subs: list[Subscription] = []
        self._listeners: list[SnapshotListener] = []
        self._current: Snapshot | None = None
        self._version = 0

    @property
    def current(self) -> Snapshot | None:
        return self._current

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        return self._version

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)

    def subscribe(self, name: str = "subscriber") -> Subscription:
        sub = Subscription(self, name=name)
        self._subs.append(sub)
        if self._current is not None:
            sub._offer(self._current)
        logger.debug("ChangeStream subscribe name=%s total=%d", name, len(self._subs))
        return sub

    def add_listener(self, listener: SnapshotListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def publish(self, snapshot: Snapshot) -> None:
        self._current = snapshot
        self._version += 1

        for sub in list(self._subs):
            sub._offer(snapshot)

        for listener in list(self._listeners):
            name = getattr(listener, "__name__", str(listener))
            try:
                listener(snapshot)
            except Exception:
                # One failing listener must not stop the others.
                logger.exception("ChangeStream listener error in '%s'", name)

        logger.debug(
            "ChangeStream published version=%d tasks=%d subscribers=%d",
            self._version,
            len(snapshot),
            len(self._subs),
        )

    def close(self) -> None:
        """Close every subscription and drop listeners."""
        for sub in list(self._subs):
            sub.close()
        self._listeners.clear()

    def _remove(self, sub: Subscription) -> None:
        if sub in self._subs:
            self._subs.remove(sub)
