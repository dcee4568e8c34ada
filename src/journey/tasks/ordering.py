# src/journey/tasks/ordering.py

"""
Ordering policy for manual reordering.

Only incomplete tasks take part in reordering. A move swaps the position
values of two neighbours in the displayed (already sorted) list, so every
reorder writes exactly two rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from .task_models import Task

# Base value used when the table is empty: the first task gets DEFAULT_POSITION + 1.
DEFAULT_POSITION = 0


def next_position(max_position: int | None) -> int:
    base = DEFAULT_POSITION if max_position is None else max_position
    return base + 1


def _index_of(displayed: Sequence[Task], task_id: int) -> int | None:
    for i, t in enumerate(displayed):
        if t.id == task_id:
            return i
    return None


def _plan_swap(displayed: Sequence[Task], task_id: int, step: int) -> tuple[Task, Task] | None:
    idx = _index_of(displayed, task_id)
    if idx is None:
        return None

    other_idx = idx + step
    if other_idx < 0 or other_idx >= len(displayed):
        return None

    current = displayed[idx]
    other = displayed[other_idx]
    if current.is_completed or other.is_completed:
        return None

    return (
        replace(current, position=other.position),
        replace(other, position=current.position),
    )


def plan_move_up(displayed: Sequence[Task], task_id: int) -> tuple[Task, Task] | None:
    """
    Swap positions with the previous displayed task.

    Returns the two updated copies, or None when the move is refused
    (task not found, already first, or the neighbour is completed).
    """
    return _plan_swap(displayed, task_id, -1)


def plan_move_down(displayed: Sequence[Task], task_id: int) -> tuple[Task, Task] | None:
    """Mirror of plan_move_up: swap with the next displayed task."""
    return _plan_swap(displayed, task_id, +1)
