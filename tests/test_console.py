# tests/test_console.py

from __future__ import annotations

import asyncio
import io
import json
import os
import threading

import httpx
import pytest

import todo_sync.connectors.console_connector as console
from todo_sync.cli.bootstrap import create_initial_state, shutdown_state


class FakeServer:
    """Tiny /tasks server for httpx.MockTransport."""

    def __init__(self) -> None:
        self.tasks = {1: {"id": 1, "title": "Buy milk", "description": "", "status": "pending"}}
        self.next_id = 2

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if request.method == "GET" and path == "/tasks":
            return httpx.Response(200, json={"tasks": list(self.tasks.values())})
        if request.method == "POST" and path == "/tasks":
            body = json.loads(request.content)
            record = {"id": self.next_id, **body}
            self.tasks[self.next_id] = record
            self.next_id += 1
            return httpx.Response(201, json=record)
        if request.method == "DELETE":
            task_id = int(path.rsplit("/", 1)[-1])
            if self.tasks.pop(task_id, None) is None:
                return httpx.Response(404, json={"detail": "Task not found"})
            return httpx.Response(204)
        return httpx.Response(405, json={"detail": "Method not allowed"})


def _script(lines: list[str]) -> console.StdinReader:
    return console.StdinReader(io.StringIO("".join(f"{line}\n" for line in lines)))


@pytest.mark.asyncio
async def test_console_session_add_delete_and_exit(capsys, settings) -> None:
    server = FakeServer()
    state = create_initial_state(settings=settings, transport=httpx.MockTransport(server))
    reader = _script(["/add Pay rent | 1st of month", "/delete 1", "hello", "/exit", "/list"])

    try:
        await console.run_console_loop(state, reader=reader)
    finally:
        await shutdown_state(state)

    out = capsys.readouterr().out
    assert "1 shown / 1 total" in out
    assert "Added: Pay rent" in out
    assert 'Deleting "Buy milk".' in out
    assert "Commands start with '/'" in out
    assert list(server.tasks) == [2]
    assert [t.id for t in state.repository.tasks] == [2]
    assert settings.data_dir.is_dir()


@pytest.mark.asyncio
async def test_console_shows_load_error_when_server_is_down(capsys, settings) -> None:
    def down(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    state = create_initial_state(settings=settings, transport=httpx.MockTransport(down))

    try:
        await console.run_console_loop(state, reader=_script([]))
    finally:
        await shutdown_state(state)

    out = capsys.readouterr().out
    assert "Couldn't load tasks. Connection refused" in out
    assert state.repository.load_error == "Connection refused"


@pytest.mark.asyncio
async def test_reader_keeps_reporting_eof() -> None:
    reader = _script(["  /help  "])

    assert await reader.read_line("> ") == "  /help  "
    with pytest.raises(EOFError):
        await reader.read_line("> ")
    with pytest.raises(EOFError):
        await reader.read_line("> ")


@pytest.mark.asyncio
async def test_exit_typed_on_a_pipe_ends_the_session(settings) -> None:
    read_fd, write_fd = os.pipe()
    stream = os.fdopen(read_fd, "r")
    reader = console.StdinReader(stream)
    state = create_initial_state(settings=settings, transport=httpx.MockTransport(FakeServer()))
    os.write(write_fd, b"/exit\n")

    try:
        await asyncio.wait_for(console.run_console_loop(state, reader=reader), timeout=2)
    finally:
        os.close(write_fd)
        await shutdown_state(state)
        if reader._thread is not None:
            reader._thread.join(timeout=1)
        stream.close()

    assert [t.id for t in state.repository.tasks] == [1]


def test_cancelling_a_session_blocked_on_input_lets_asyncio_run_return(settings) -> None:
    # Nothing is ever written to the pipe, so the reader stays blocked in readline().
    read_fd, write_fd = os.pipe()
    stream = os.fdopen(read_fd, "r")
    reader = console.StdinReader(stream)
    outcome: dict[str, bool] = {}

    async def session() -> None:
        state = create_initial_state(settings=settings, transport=httpx.MockTransport(FakeServer()))
        runner = asyncio.create_task(console.run_console_loop(state, reader=reader))
        while reader._thread is None:
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.05)

        runner.cancel()
        try:
            await runner
        except asyncio.CancelledError:
            outcome["cancelled"] = True
        await shutdown_state(state)

    worker = threading.Thread(target=asyncio.run, args=(session(),), daemon=True)
    worker.start()
    worker.join(timeout=5)

    try:
        # asyncio.run() also shuts down the default executor; a read parked there would hang it.
        assert not worker.is_alive()
        assert outcome == {"cancelled": True}
    finally:
        os.close(write_fd)
        if reader._thread is not None:
            reader._thread.join(timeout=1)
        stream.close()
