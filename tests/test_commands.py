# tests/test_commands.py

from __future__ import annotations

import pytest

from todo_sync.api.errors import ApiError
from todo_sync.cli.commands import CommandRegistry, registry
from todo_sync.tasks.task_models import TaskStatus
from todo_sync.tasks.task_view import FilterMode

from .fakes import settle


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    async def h2(state, args):
        called["h2"] += 1
        return "h2"

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert await reg.handle(state, "/a x") == "h2"
    assert await reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")


@pytest.mark.asyncio
async def test_list_renders_pending_first(state) -> None:
    out = await registry.handle(state, "/list")

    lines = out.splitlines()
    assert lines[0].startswith("3 shown / 3 total (2 pending, 1 completed)")
    assert lines[1] == "  [ ] #7 X"
    assert lines[2] == "  [ ] #3 Buy milk"
    assert lines[3] == "  [x] #9 Call Bob"


@pytest.mark.asyncio
async def test_filter_and_search_update_view_state(state) -> None:
    await registry.handle(state, "/filter completed")
    out = await registry.handle(state, "/search car")

    assert state.view.task_filter.mode is FilterMode.COMPLETED
    assert state.view.task_filter.query == "car"
    assert "#9 Call Bob" in out
    assert "Usage" in await registry.handle(state, "/filter archived")


@pytest.mark.asyncio
async def test_add_creates_task_with_description(state, gateway) -> None:
    out = await registry.handle(state, "/add Pay rent | before Friday")

    assert out == "Added: Pay rent"
    [(_, draft)] = gateway.called("create")
    assert draft.description == "before Friday"
    assert state.repository.tasks[0].title == "Pay rent"


@pytest.mark.asyncio
async def test_failed_edit_keeps_session_for_retry(state, gateway) -> None:
    gateway.fail["replace"] = ApiError("Service Unavailable", status=503)

    out = await registry.handle(state, "/edit 7 Renamed")
    assert "Couldn't save. Service Unavailable" in out
    assert state.form.is_open

    del gateway.fail["replace"]
    assert await registry.handle(state, "/retry") == "Saved."
    assert state.repository.get(7).title == "Renamed"
    assert await registry.handle(state, "/cancel") == "No open edit session."


@pytest.mark.asyncio
async def test_toggle_and_delete_run_in_background(state, gateway) -> None:
    patch_gate = gateway.hold("patch")
    out = await registry.handle(state, "/toggle 7")
    assert out == "Marking #7 as completed."
    await settle()
    # Optimistic flip is visible before the request settles.
    assert state.repository.get(7).status is TaskStatus.COMPLETED
    patch_gate.set()

    gate = gateway.hold("remove")
    assert await registry.handle(state, "/rm 3") == 'Deleting "Buy milk".'
    await settle()
    assert state.repository.is_deleting(3)

    # A refresh brings the row back while the delete is in flight; actions on it are refused.
    await state.repository.refresh()
    assert await registry.handle(state, "/toggle 3") == "Task #3 is being deleted."
    assert await registry.handle(state, "/delete 3") == "Task #3 is already being deleted."

    gate.set()
    await state.drain()
    assert 3 not in gateway.records
    assert not state.repository.is_deleting(3)
    assert state.repository.get(7).status is TaskStatus.COMPLETED
    assert not state.background


@pytest.mark.asyncio
async def test_unknown_task_id(state) -> None:
    assert await registry.handle(state, "/toggle 404") == "No task with id 404."
