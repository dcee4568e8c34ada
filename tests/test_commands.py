# tests/test_commands.py

from __future__ import annotations

import pytest

from journey.cli.commands import CommandRegistry, registry
from journey.core.state import AppState
from journey.tasks.task_models import Task


@pytest.mark.asyncio
async def test_command_registry_routes_sync_and_async_handlers(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"sync": 0, "async": 0}

    def h2(state, args):
        called["sync"] += 1
        return "sync"

    async def h3(state, args, emit):
        called["async"] += 1
        if emit is not None:
            emit("note")
        return "async " + " ".join(args)

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert await reg.handle(state, "/a x") == "sync"
    assert await reg.handle(state, "/BEE y z", emit=lambda _: None) == "async y z"
    assert called == {"sync": 1, "async": 1}


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_task_commands_end_to_end(app_state: AppState) -> None:
    assert "Usage" in (await registry.handle(app_state, "/add   ") or "")

    assert (await registry.handle(app_state, "/add Buy milk")) == "Added #1: Buy milk"
    assert (await registry.handle(app_state, "/add Walk dog")) == "Added #2: Walk dog"

    assert "not in move mode" in (await registry.handle(app_state, "/down 1") or "")
    assert "move mode" in (await registry.handle(app_state, "/move 1") or "")

    listing = await registry.handle(app_state, "/down") or ""
    assert listing.index("Walk dog") < listing.index("Buy milk")
    assert "can't move down" in (await registry.handle(app_state, "/down") or "")

    assert "marked done" in (await registry.handle(app_state, "/done 2") or "")
    assert "renamed" in (await registry.handle(app_state, "/edit 1 Buy oat milk") or "")
    assert "not found" in (await registry.handle(app_state, "/rm 42") or "")

    widget = await registry.handle(app_state, "/widget") or ""
    assert "Buy oat milk" in widget and "Walk dog" not in widget

    assert "deleted" in (await registry.handle(app_state, "/rm #1") or "")
    assert "0 of 1" not in (await registry.handle(app_state, "/status") or "")
    assert "Tasks: 1 (1 completed)" in (await registry.handle(app_state, "/status") or "")


@pytest.mark.asyncio
async def test_status_counts_rows_in_the_store(app_state: AppState) -> None:
    app_state.repo.store.insert(Task.new("a"))
    app_state.repo.store.insert(Task.new("b"))

    status = await registry.handle(app_state, "/status") or ""
    assert "Tasks: 2 (0 completed)" in status
    assert str(app_state.settings.tasks_db_path) in status
    assert "Widget: ON" in status
