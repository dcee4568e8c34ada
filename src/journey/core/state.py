# src/journey/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .ports import TaskRepo, WidgetSurface

if TYPE_CHECKING:
    from ..views.list_view import ListView


@dataclass
class AppState:
    # Settings are stored on the state so components don't read globals.
    settings: Any

    repo: TaskRepo

    # Wired by bootstrap once the state exists (views need the state for intents).
    list_view: ListView | None = None
    widget: WidgetSurface | None = None
