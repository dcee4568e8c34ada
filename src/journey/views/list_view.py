# src/journey/views/list_view.py

from __future__ import annotations

import logging

from ..core.ports import Snapshot
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import Task
from .base import SnapshotView

logger = logging.getLogger(__name__)

EMPTY_TITLE = "Your list is clear"
EMPTY_HINT = "Add a task to start your journey"


class ListView(SnapshotView):
    """
    Interactive list: renders every task and turns user actions into intents.

    Move mode is UI-only state: at most one task is in move mode, and only
    that task accepts up/down.
    """

    name = "list-view"

    def __init__(self, state: AppState) -> None:
        super().__init__(state.repo)
        self._state = state
        self.move_mode_id: int | None = None

    # ---- snapshot handling ----

    def on_snapshot(self, snapshot: Snapshot) -> None:
        super().on_snapshot(snapshot)
        if self.move_mode_id is not None and not any(t.id == self.move_mode_id for t in snapshot):
            logger.debug("Move mode cleared, task id=%s is gone", self.move_mode_id)
            self.move_mode_id = None

    def displayed(self) -> Snapshot:
        """Latest committed list; reorders are planned against it so positions are never stale."""
        return self._state.repo.current()

    def visible(self) -> Snapshot:
        """What the view has received through its subscription."""
        return self.items if self.running else self.displayed()

    def progress(self) -> tuple[int, int]:
        items = self.visible()
        return sum(1 for t in items if t.is_completed), len(items)

    # ---- intents ----

    async def create(self, title: str) -> Task:
        return await task_api.create_task(self._state, title)

    async def toggle(self, task_id: int) -> Task | None:
        if self.move_mode_id == task_id:
            # Tapping the task being moved just leaves move mode.
            self.move_mode_id = None
            return None
        return await task_api.toggle_task(self._state, task_id)

    async def edit(self, task_id: int, title: str) -> Task | None:
        return await task_api.edit_task(self._state, task_id, title)

    async def delete(self, task_id: int) -> bool:
        return await task_api.delete_task(self._state, task_id)

    def enter_move_mode(self, task_id: int) -> int | None:
        """Toggle move mode for task_id; any other task leaves move mode."""
        self.move_mode_id = None if self.move_mode_id == task_id else task_id
        return self.move_mode_id

    async def move_up(self, task_id: int) -> bool:
        if self.move_mode_id != task_id:
            return False
        return await task_api.move_task_up(self._state, task_id, self.displayed())

    async def move_down(self, task_id: int) -> bool:
        if self.move_mode_id != task_id:
            return False
        return await task_api.move_task_down(self._state, task_id, self.displayed())

    # ---- rendering ----

    def render(self, app_name: str = "My Journey") -> list[str]:
        items = self.visible()
        lines = [app_name]

        if not items:
            lines.append(EMPTY_TITLE)
            lines.append(EMPTY_HINT)
            return lines

        done, total = self.progress()
        lines.append(f"{done} of {total} tasks completed")

        for task in items:
            box = "[x]" if task.is_completed else "[ ]"
            marker = " <move>" if task.id == self.move_mode_id else ""
            lines.append(f"{box} #{task.id} {task.title}{marker}")
        return lines
