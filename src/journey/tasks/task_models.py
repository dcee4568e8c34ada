# src/journey/tasks/task_models.py

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Task:
    """
    A single to-do record.

    Tasks are immutable values: a mutation is expressed as a copy
    (dataclasses.replace) handed to the repository.

    Notes:
    - id is None until the store assigns one.
    - position is None until the store resolves it (max position + 1).
    """

    title: str
    is_completed: bool = False
    position: int | None = None
    created_at: float = field(default_factory=time.time)
    id: int | None = None

    @classmethod
    def new(cls, title: str) -> Task:
        return cls(title=title)


def incomplete(tasks) -> tuple[Task, ...]:
    return tuple(t for t in tasks if not t.is_completed)
