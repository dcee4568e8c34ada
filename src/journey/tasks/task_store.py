# src/journey/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from .ordering import next_position
from .task_models import Task

logger = logging.getLogger(__name__)

_ORDER_BY = "ORDER BY is_completed ASC, position ASC, created_at ASC, id ASC"


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    - writers are serialized by TaskRepository, not here
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS todo_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    position INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(todo_items)")
            cols = {row["name"] for row in cur.fetchall()}

            if "position" not in cols:
                # Databases from before manual reordering: give every row its own slot.
                cur.execute("ALTER TABLE todo_items ADD COLUMN position INTEGER NOT NULL DEFAULT 0")
                cur.execute("SELECT id FROM todo_items ORDER BY created_at ASC, id ASC")
                ids = [int(r["id"]) for r in cur.fetchall()]
                cur.executemany(
                    "UPDATE todo_items SET position = ? WHERE id = ?",
                    [(pos, task_id) for pos, task_id in enumerate(ids, start=1)],
                )
                logger.info("TaskStore migration: added column position (backfilled %d rows)", len(ids))

            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_todo_items_order "
                "ON todo_items(is_completed, position, created_at)"
            )

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            is_completed=bool(row["is_completed"]),
            position=int(row["position"] or 0),
            created_at=float(row["created_at"] or 0.0),
        )

    @staticmethod
    def _max_position(cur: sqlite3.Cursor) -> int | None:
        cur.execute("SELECT MAX(position) FROM todo_items")
        (value,) = cur.fetchone()
        return None if value is None else int(value)

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM todo_items")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def max_position(self) -> int | None:
        conn = self._get_conn()
        try:
            return self._max_position(conn.cursor())
        finally:
            conn.close()

    def list_tasks(self) -> tuple[Task, ...]:
        """All tasks in display order."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT * FROM todo_items {_ORDER_BY}")
            return tuple(self._row_to_task(r) for r in cur.fetchall())
        finally:
            conn.close()

    def insert(self, task: Task) -> Task:
        """
        Insert a task and return the stored copy.

        - id None -> AUTOINCREMENT assigns one (never reused)
        - position None -> max position + 1, computed in the same transaction
        - explicit id that already exists -> the old row is replaced wholesale
        """
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN IMMEDIATE")

            position = task.position
            if position is None:
                position = next_position(self._max_position(cur))

            cur.execute(
                """
                INSERT OR REPLACE INTO todo_items(id, title, is_completed, position, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    task.title,
                    1 if task.is_completed else 0,
                    int(position),
                    float(task.created_at),
                ),
            )
            conn.commit()

            rowid = cur.lastrowid if task.id is None else task.id
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for todo_items insert")
            stored = Task(
                id=int(rowid),
                title=task.title,
                is_completed=task.is_completed,
                position=int(position),
                created_at=float(task.created_at),
            )
            logger.debug("Task inserted id=%s position=%s", stored.id, stored.position)
            return stored
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def _update_row(cur: sqlite3.Cursor, task: Task) -> int:
        if task.id is None:
            return 0
        cur.execute(
            """
            UPDATE todo_items
            SET title = ?,
                is_completed = ?,
                position = COALESCE(?, position),
                created_at = ?
            WHERE id = ?
            """,
            (
                task.title,
                1 if task.is_completed else 0,
                None if task.position is None else int(task.position),
                float(task.created_at),
                int(task.id),
            ),
        )
        return cur.rowcount

    def update(self, task: Task) -> bool:
        """Replace all fields of the matching row. Returns False if no row matched."""
        return self.update_all([task]) > 0

    def update_all(self, tasks: Iterable[Task]) -> int:
        """
        Update several rows in one transaction.

        Either every row is written or none is; returns the number of rows changed.
        """
        batch = list(tasks)
        if not batch:
            return 0

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN IMMEDIATE")
            changed = 0
            for task in batch:
                changed += self._update_row(cur, task)
            conn.commit()
            logger.debug("Tasks updated ids=%s changed=%d", [t.id for t in batch], changed)
            return changed
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def swap_positions(self, task_id: int, other_id: int) -> bool:
        """
        Exchange the position values of two open tasks in one transaction.

        Both rows are re-read inside the transaction; the swap is refused (False)
        if either row is gone or completed. Only the position column is written.
        """
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN IMMEDIATE")
            cur.execute(
                "SELECT id, is_completed, position FROM todo_items WHERE id IN (?, ?)",
                (int(task_id), int(other_id)),
            )
            rows = {int(r["id"]): r for r in cur.fetchall()}
            if len(rows) != 2 or any(r["is_completed"] for r in rows.values()):
                conn.rollback()
                logger.debug("Swap refused ids=%s,%s", task_id, other_id)
                return False

            cur.executemany(
                "UPDATE todo_items SET position = ? WHERE id = ?",
                [
                    (int(rows[other_id]["position"]), int(task_id)),
                    (int(rows[task_id]["position"]), int(other_id)),
                ],
            )
            conn.commit()
            logger.debug("Swapped positions ids=%s,%s", task_id, other_id)
            return True
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def delete(self, task: Task) -> bool:
        if task.id is None:
            return False

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("DELETE FROM todo_items WHERE id = ?", (int(task.id),))
            conn.commit()
            deleted = cur.rowcount == 1
            logger.debug("Task delete id=%s deleted=%s", task.id, deleted)
            return deleted
        finally:
            conn.close()
