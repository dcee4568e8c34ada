# src/journey/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- constructs the store/repository explicitly and wires the views into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.change_stream import ChangeStream
from ..tasks.repository import TaskRepository
from ..tasks.task_store import TaskStore
from ..views.list_view import ListView
from ..views.widget import FileWidgetSink, SummaryWidget

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    repo = TaskRepository(TaskStore(settings.tasks_db_path), ChangeStream())
    state = AppState(settings=settings, repo=repo)
    state.list_view = ListView(state)

    if getattr(settings, "widget_enabled", True):
        widget_path = getattr(settings, "widget_path", None)
        sink = FileWidgetSink(widget_path) if widget_path else None
        state.widget = SummaryWidget(repo, sink=sink, title=str(settings.app_name))
        logger.debug("Widget enabled path=%s", widget_path)

    return state


async def start_views(state: AppState) -> None:
    """Publish the initial snapshot and attach both projections to the live query."""
    await state.repo.refresh()
    if state.list_view is not None:
        state.list_view.start()
    if isinstance(state.widget, SummaryWidget):
        state.widget.start()


async def stop_views(state: AppState) -> None:
    if isinstance(state.widget, SummaryWidget):
        await state.widget.wait_until_idle()
        await state.widget.stop()
    if state.list_view is not None:
        await state.list_view.stop()
