# src/journey/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..views.list_view import ListView
from ..views.widget import SummaryWidget, project

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _view(state: AppState) -> ListView:
    if state.list_view is None:
        state.list_view = ListView(state)
    return state.list_view


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError:
        return None


def _render_list(state: AppState) -> str:
    app_name = str(getattr(state.settings, "app_name", "My Journey"))
    return "\n".join(_view(state).render(app_name))


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return _render_list(state)


async def cmd_status(state: AppState, args: list[str]) -> str:
    done, _ = _view(state).progress()
    total = await state.repo.count()
    db_path = getattr(state.settings, "tasks_db_path", "?")
    widget = "ON" if state.widget is not None else "OFF"
    return (
        "Status:\n"
        f"  Tasks: {total} ({done} completed)\n"
        f"  Database: {db_path}\n"
        f"  Widget: {widget}"
    )


async def cmd_add(state: AppState, args: list[str]) -> str:
    title = " ".join(args)
    try:
        task = await _view(state).create(title)
    except ValueError:
        return "Usage: /add <title> (title must not be blank)."
    return f"Added #{task.id}: {task.title}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    view = _view(state)
    if view.move_mode_id == task_id:
        await view.toggle(task_id)
        return f"Task #{task_id} left move mode."
    task = await view.toggle(task_id)
    if task is None:
        return f"Task #{task_id} not found."
    return f"Task #{task_id} marked {'done' if task.is_completed else 'open'}."


async def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /edit <id> <new title>"
    try:
        task = await _view(state).edit(task_id, " ".join(args[1:]))
    except ValueError:
        return "Usage: /edit <id> <new title> (title must not be blank)."
    if task is None:
        return f"Task #{task_id} not found."
    return f"Task #{task_id} renamed: {task.title}"


async def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /rm <id>"
    if not await _view(state).delete(task_id):
        return f"Task #{task_id} not found."
    return f"Task #{task_id} deleted."


def cmd_move(state: AppState, args: list[str]) -> str:
    """
    /move <id>  -> enter move mode for a task (again to leave it)
    """
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /move <id>"
    if not any(t.id == task_id for t in _view(state).displayed()):
        return f"Task #{task_id} not found."
    current = _view(state).enter_move_mode(task_id)
    if current is None:
        return f"Task #{task_id} left move mode."
    return f"Task #{task_id} in move mode. Use /up and /down."


async def _cmd_step(state: AppState, args: list[str], up: bool) -> str:
    view = _view(state)
    task_id = _parse_id(args)
    if task_id is None:
        task_id = view.move_mode_id
    if task_id is None:
        return "No task in move mode. Use /move <id> first."
    if view.move_mode_id != task_id:
        return f"Task #{task_id} is not in move mode. Use /move {task_id} first."

    moved = await (view.move_up(task_id) if up else view.move_down(task_id))
    if not moved:
        return f"Task #{task_id} can't move {'up' if up else 'down'}."
    return _render_list(state)


async def cmd_up(state: AppState, args: list[str]) -> str:
    return await _cmd_step(state, args, up=True)


async def cmd_down(state: AppState, args: list[str]) -> str:
    return await _cmd_step(state, args, up=False)


def cmd_widget(state: AppState, args: list[str]) -> str:
    widget = state.widget
    if isinstance(widget, SummaryWidget):
        content = widget.content if widget.running else project(state.repo.current())
    else:
        content = project(state.repo.current())
    return "\n".join(content.lines())


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("status", cmd_status, help_text="Show task counts and storage location.")
registry.register("add", cmd_add, help_text="Add a task: /add <title>.", aliases=["new"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <id> <title>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del"])
registry.register("move", cmd_move, help_text="Enter/leave move mode: /move <id>.")
registry.register("up", cmd_up, help_text="Move the task in move mode up.")
registry.register("down", cmd_down, help_text="Move the task in move mode down.")
registry.register("widget", cmd_widget, help_text="Show the summary widget.")
