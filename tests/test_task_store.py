# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from dataclasses import replace
from pathlib import Path

import pytest

from journey.tasks.task_models import Task
from journey.tasks.task_store import TaskStore


def test_insert_assigns_ids_and_appends_positions(store: TaskStore) -> None:
    assert store.max_position() is None

    milk = store.insert(Task.new("Buy milk"))
    dog = store.insert(Task.new("Walk dog"))

    assert milk.id is not None and dog.id is not None
    assert milk.id != dog.id
    assert milk.position == 1
    assert dog.position == 2
    assert store.max_position() == 2
    assert [t.title for t in store.list_tasks()] == ["Buy milk", "Walk dog"]


def test_explicit_position_is_kept(store: TaskStore) -> None:
    store.insert(Task(title="a", position=10))
    b = store.insert(Task.new("b"))
    assert b.position == 11


def test_ids_are_not_reused_after_delete(store: TaskStore) -> None:
    a = store.insert(Task.new("a"))
    b = store.insert(Task.new("b"))
    assert store.delete(b)
    c = store.insert(Task.new("c"))
    assert c.id is not None and b.id is not None and a.id is not None
    assert c.id > b.id


def test_insert_with_existing_id_replaces_row(store: TaskStore) -> None:
    a = store.insert(Task.new("a"))
    store.insert(replace(a, title="a2", is_completed=True))

    rows = store.list_tasks()
    assert len(rows) == 1
    assert rows[0].id == a.id
    assert rows[0].title == "a2"
    assert rows[0].is_completed


def test_update_and_delete_unknown_id_are_noops(store: TaskStore) -> None:
    store.insert(Task.new("a"))
    ghost = Task(id=999, title="ghost", position=1)

    assert store.update(ghost) is False
    assert store.delete(ghost) is False
    assert store.delete(Task.new("never stored")) is False
    assert [t.title for t in store.list_tasks()] == ["a"]


def test_sort_order_incomplete_first_then_position(store: TaskStore) -> None:
    a = store.insert(Task(title="a", position=3, created_at=1.0))
    store.insert(Task(title="b", position=1, created_at=2.0))
    store.insert(Task(title="c", position=2, created_at=3.0, is_completed=True))
    store.insert(Task(title="d", position=1, created_at=4.0, is_completed=True))
    store.insert(Task(title="e", position=1, created_at=0.5))

    assert [t.title for t in store.list_tasks()] == ["e", "b", "a", "d", "c"]

    store.update(replace(a, is_completed=True))
    assert [t.title for t in store.list_tasks()] == ["e", "b", "d", "c", "a"]


def test_update_all_is_all_or_nothing(store: TaskStore) -> None:
    a = store.insert(Task.new("a"))
    b = store.insert(Task.new("b"))

    # title=None violates NOT NULL on the second row; the first must roll back too.
    broken = [replace(a, position=b.position), replace(b, title=None, position=a.position)]  # type: ignore[arg-type]
    with pytest.raises(sqlite3.IntegrityError):
        store.update_all(broken)

    after = {t.id: t for t in store.list_tasks()}
    assert after[a.id].position == a.position
    assert after[b.id].position == b.position


def test_swap_positions_touches_only_position(store: TaskStore) -> None:
    a = store.insert(Task.new("a"))
    b = store.insert(Task.new("b"))
    # A stale copy must not matter: the swap reads rows inside its transaction.
    store.update(replace(a, title="a2"))

    assert store.swap_positions(b.id, a.id) is True

    after = {t.id: t for t in store.list_tasks()}
    assert after[a.id].position == b.position
    assert after[b.id].position == a.position
    assert after[a.id].title == "a2"
    assert [t.title for t in store.list_tasks()] == ["b", "a2"]


def test_swap_positions_refuses_completed_or_missing(store: TaskStore) -> None:
    a = store.insert(Task.new("a"))
    b = store.insert(Task.new("b"))
    store.update(replace(a, is_completed=True))

    assert store.swap_positions(b.id, a.id) is False
    assert store.swap_positions(b.id, 999) is False

    after = {t.id: t for t in store.list_tasks()}
    assert after[a.id].position == a.position and after[a.id].is_completed
    assert after[b.id].position == b.position


def test_update_without_position_keeps_stored_one(store: TaskStore) -> None:
    store.insert(Task.new("first"))
    b = store.insert(Task.new("b"))

    assert store.update(Task(id=b.id, title="b2", created_at=b.created_at)) is True

    stored = {t.id: t for t in store.list_tasks()}[b.id]
    assert stored.title == "b2"
    assert stored.position == 2


def test_legacy_database_gets_position_backfilled(tmp_path: Path) -> None:
    db = tmp_path / "legacy.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute(
        """
        CREATE TABLE todo_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            is_completed INTEGER NOT NULL DEFAULT 0,
            created_at REAL NOT NULL
        )
        """
    )
    conn.executemany(
        "INSERT INTO todo_items(title, is_completed, created_at) VALUES (?, ?, ?)",
        [("second", 0, 20.0), ("first", 0, 10.0), ("third", 1, 30.0)],
    )
    conn.commit()
    conn.close()

    store = TaskStore(db)
    by_title = {t.title: t for t in store.list_tasks()}

    assert by_title["first"].position == 1
    assert by_title["second"].position == 2
    assert by_title["third"].position == 3
    assert store.insert(Task.new("fourth")).position == 4
