# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field

from journey.tasks.change_stream import Snapshot
from journey.views.widget import WidgetContent


class RecordingWidget:
    """
    Fake widget surface: only counts refresh requests.
    """

    def __init__(self) -> None:
        self.refreshes = 0

    def request_refresh(self) -> None:
        self.refreshes += 1


@dataclass(slots=True)
class RecordingSink:
    """Collects every rendered widget content."""

    rendered: list[WidgetContent] = field(default_factory=list)

    def __call__(self, content: WidgetContent) -> None:
        self.rendered.append(content)


@dataclass(slots=True)
class SnapshotRecorder:
    """ChangeStream listener that keeps every published snapshot."""

    snapshots: list[Snapshot] = field(default_factory=list)

    def __call__(self, snapshot: Snapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def last(self) -> Snapshot:
        return self.snapshots[-1]
