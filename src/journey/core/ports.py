# src/journey/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The intent layer and the views depend on Protocols instead of concrete
implementations. This keeps storage and the widget surface swappable and
makes testing easier.
"""

from typing import Any, Iterable, Protocol

from ..tasks.task_models import Task

Snapshot = tuple[Task, ...]


class TaskRepo(Protocol):
    """Async task repository (single writer, publishes snapshots after commit)."""

    def current(self) -> Snapshot: ...
    def all_items_live(self, name: str = "subscriber") -> Any: ...

    async def snapshot(self) -> Snapshot: ...
    async def refresh(self) -> Snapshot: ...
    async def max_position(self) -> int | None: ...
    async def count(self) -> int: ...
    async def insert(self, task: Task) -> Task: ...
    async def update(self, task: Task) -> bool: ...
    async def update_all(self, tasks: Iterable[Task]) -> int: ...
    async def swap_positions(self, task_id: int, other_id: int) -> bool: ...
    async def delete(self, task: Task) -> bool: ...


class WidgetSurface(Protocol):
    """External glanceable surface that can be told to redraw now."""

    def request_refresh(self) -> None: ...


class WidgetSink(Protocol):
    """Where rendered widget content ends up (file, terminal, test fake...)."""

    def __call__(self, content: Any) -> None: ...
