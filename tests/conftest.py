# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from journey.cli.bootstrap import create_initial_state
from journey.core.state import AppState
from journey.tasks.repository import TaskRepository
from journey.tasks.task_store import TaskStore

from .fakes import RecordingWidget


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="My Journey",
        log_level="DEBUG",
        log_dir=tmp_path,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        console_enabled=False,
        widget_enabled=True,
        widget_path=tmp_path / "widget.txt",
    )


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    return TaskStore(tmp_path / "tasks.sqlite3")


@pytest.fixture()
def repo(store: TaskStore) -> TaskRepository:
    return TaskRepository(store)


@pytest.fixture()
def state(settings: SimpleNamespace, repo: TaskRepository) -> AppState:
    """
    AppState with a real SQLite repository and a recording widget.

    NOTE: We keep the real store here because ordering and snapshot
    behaviour are exactly what we want to test.
    """
    return AppState(settings=settings, repo=repo, widget=RecordingWidget())


@pytest.fixture()
def app_state(settings: SimpleNamespace) -> AppState:
    """Fully wired state as the CLI builds it (list view + summary widget)."""
    return create_initial_state(settings=settings)
