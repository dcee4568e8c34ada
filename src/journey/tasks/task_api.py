# src/journey/tasks/task_api.py

"""
User intents on the task list.

These helpers are the caller side of the repository: they validate input,
look tasks up in the latest snapshot, issue the mutation and then poke the
widget so it redraws. Unknown ids and refused moves are quiet no-ops.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from ..core.state import AppState
from .ordering import plan_move_down, plan_move_up
from .task_models import Task

logger = logging.getLogger(__name__)


def _require_title(title: str | None) -> str:
    if not title or not title.strip():
        raise ValueError("title is required")
    return title.strip()


def _find(state: AppState, task_id: int) -> Task | None:
    for task in state.repo.current():
        if task.id == task_id:
            return task
    return None


def _notify_widget(state: AppState) -> None:
    if state.widget is None:
        return
    try:
        state.widget.request_refresh()
    except Exception:
        logger.exception("Widget refresh request failed.")


async def create_task(state: AppState, title: str) -> Task:
    """Append a new incomplete task after every existing one."""
    clean = _require_title(title)
    task = await state.repo.insert(Task.new(clean))
    logger.info("Task created id=%s position=%s", task.id, task.position)
    _notify_widget(state)
    return task


async def toggle_task(state: AppState, task_id: int) -> Task | None:
    """Flip completion. The position is kept as-is."""
    task = _find(state, task_id)
    if task is None:
        return None
    updated = replace(task, is_completed=not task.is_completed)
    changed = await state.repo.update(updated)
    _notify_widget(state)
    if not changed:
        return None
    logger.info("Task toggled id=%s completed=%s", task_id, updated.is_completed)
    return updated


async def edit_task(state: AppState, task_id: int, title: str) -> Task | None:
    clean = _require_title(title)
    task = _find(state, task_id)
    if task is None:
        return None
    updated = replace(task, title=clean)
    changed = await state.repo.update(updated)
    _notify_widget(state)
    return updated if changed else None


async def delete_task(state: AppState, task_id: int) -> bool:
    task = _find(state, task_id)
    if task is None:
        return False
    deleted = await state.repo.delete(task)
    _notify_widget(state)
    if deleted:
        logger.info("Task deleted id=%s", task_id)
    return deleted


async def _apply_move(state: AppState, plan: tuple[Task, Task] | None, task_id: int, label: str) -> bool:
    if plan is None:
        logger.debug("Move %s refused id=%s", label, task_id)
        return False
    moved, other = plan
    # Re-checked under the writer lock: refused if either task was completed meanwhile.
    swapped = await state.repo.swap_positions(moved.id, other.id)
    _notify_widget(state)
    return swapped


async def move_task_up(state: AppState, task_id: int, displayed: Sequence[Task] | None = None) -> bool:
    """
    Swap positions with the task displayed just above.

    `displayed` is the list the user is looking at; defaults to the latest snapshot.
    """
    shown = state.repo.current() if displayed is None else displayed
    return await _apply_move(state, plan_move_up(shown, task_id), task_id, "up")


async def move_task_down(state: AppState, task_id: int, displayed: Sequence[Task] | None = None) -> bool:
    shown = state.repo.current() if displayed is None else displayed
    return await _apply_move(state, plan_move_down(shown, task_id), task_id, "down")
