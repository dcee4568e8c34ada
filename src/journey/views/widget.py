# src/journey/views/widget.py

from __future__ import annotations

"""
Summary widget: a read-only, glanceable list of open tasks.

The widget follows the live query like any other view, and also redraws on an
explicit refresh signal sent after each mutation made from the list view.
"""

import asyncio
import contextlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..core.ports import Snapshot, TaskRepo, WidgetSink
from ..tasks.task_models import incomplete
from .base import SnapshotView

logger = logging.getLogger(__name__)

WIDGET_TITLE = "My Journey"
WIDGET_EMPTY = "No active tasks"

# Ten soft colours, handed out round-robin by row index.
PALETTE: tuple[str, ...] = (
    "#FFCDD2",  # light red
    "#FFF9C4",  # light yellow
    "#C8E6C9",  # light green
    "#BBDEFB",  # light blue
    "#E1BEE7",  # light purple
    "#FFE0B2",  # light orange
    "#B2EBF2",  # light cyan
    "#F8BBD0",  # light pink
    "#B2DFDB",  # light teal
    "#C5CAE9",  # light indigo
)


@dataclass(frozen=True, slots=True)
class WidgetRow:
    task_id: int | None
    title: str
    color: str


@dataclass(frozen=True, slots=True)
class WidgetContent:
    title: str
    rows: tuple[WidgetRow, ...]

    @property
    def empty(self) -> bool:
        return not self.rows

    def lines(self) -> list[str]:
        out = [self.title]
        if not self.rows:
            out.append(WIDGET_EMPTY)
            return out
        out.extend(f"[{row.color}] {row.title}" for row in self.rows)
        return out


def color_for(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


def project(snapshot: Snapshot, title: str = WIDGET_TITLE) -> WidgetContent:
    """Keep open tasks only, in display order, each with its palette colour."""
    rows = tuple(
        WidgetRow(task_id=t.id, title=t.title, color=color_for(i))
        for i, t in enumerate(incomplete(snapshot))
    )
    return WidgetContent(title=title, rows=rows)


class FileWidgetSink:
    """Writes the widget as plain text, e.g. for a status bar or desktop overlay."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __call__(self, content: WidgetContent) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text("\n".join(content.lines()) + "\n", "utf-8")
        os.replace(tmp, self.path)


class SummaryWidget(SnapshotView):
    name = "summary-widget"

    def __init__(
        self,
        repo: TaskRepo,
        sink: WidgetSink | None = None,
        title: str = WIDGET_TITLE,
    ) -> None:
        super().__init__(repo)
        self._sink = sink
        self._title = title
        self._pending: set[asyncio.Task] = set()
        self.content = WidgetContent(title=title, rows=())
        self.render_count = 0

    def on_snapshot(self, snapshot: Snapshot) -> None:
        super().on_snapshot(snapshot)
        self._render(snapshot)

    def _render(self, snapshot: Snapshot) -> None:
        self.content = project(snapshot, self._title)
        self.render_count += 1
        if self._sink is None:
            return
        try:
            self._sink(self.content)
        except OSError:
            logger.exception("Widget sink failed")

    async def refresh(self) -> WidgetContent:
        """Redraw now from the latest committed snapshot."""
        snapshot = self._repo.current()
        self.items = snapshot
        self._render(snapshot)
        logger.debug("Widget refreshed rows=%d", len(self.content.rows))
        return self.content

    def request_refresh(self) -> None:
        """Schedule refresh() without making the caller wait for it."""
        task = asyncio.create_task(self.refresh(), name="widget-refresh")
        self._pending.add(task)
        task.add_done_callback(self._refresh_done)

    def _refresh_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Widget refresh failed", exc_info=exc)

    async def wait_until_idle(self) -> None:
        """Wait for scheduled refreshes (used on shutdown and in tests)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def stop(self) -> None:
        for task in list(self._pending):
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        self._pending.clear()
        await super().stop()
