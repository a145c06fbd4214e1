# src/todo_sync/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from datetime import datetime
from typing import TextIO

from ..cli.commands import registry as command_registry
from ..cli.commands import render_task_list
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = "todo> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class StdinReader:
    """
    Line reader that never blocks the event loop or its default executor.

    A daemon thread owns the blocking readline() and hands lines to the loop
    through an asyncio.Queue. Cancelling read_line() returns immediately; the
    thread dies with the process.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    def _deliver(self, line: str | None) -> bool:
        loop = self._loop
        if loop is None or loop.is_closed():
            return False
        try:
            loop.call_soon_threadsafe(self._queue.put_nowait, line)
        except RuntimeError:
            # Loop closed between the check and the call.
            return False
        return True

    def _run(self) -> None:
        while True:
            try:
                line = self._stream.readline()
            except (OSError, ValueError):
                logger.debug("Console input stream failed.", exc_info=True)
                line = ""
            if not line:
                self._deliver(None)
                return
            if not self._deliver(line.rstrip("\r\n")):
                return

    def _ensure_started(self) -> None:
        if self._thread is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._thread = threading.Thread(target=self._run, name="console-stdin", daemon=True)
        self._thread.start()

    async def read_line(self, prompt: str) -> str:
        """Return the next line; raises EOFError when the stream is exhausted."""
        self._ensure_started()
        print(prompt, end="", flush=True)
        line = await self._queue.get()
        if line is None:
            # Keep reporting EOF on later calls too.
            self._queue.put_nowait(None)
            raise EOFError
        return line


async def run_console_loop(state: AppState, *, reader: StdinReader | None = None) -> None:
    app_name = str(getattr(state.settings, "app_name", "todo-sync"))
    reader = reader or StdinReader()
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Use /help for commands, /exit to quit.")

    await state.repository.refresh()
    print(render_task_list(state.snapshot()), flush=True)

    while True:
        try:
            line = (await reader.read_line(PROMPT)).strip()
        except EOFError:
            print()
            logger.info("Console EOF received, exiting.")
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = await command_registry.handle(state, line, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Commands start with '/'. Use /help to list them."
        _print_ts(response)

    if state.background:
        _print_ts(f"Waiting for {len(state.background)} pending operation(s)...")
    await state.drain()
    logger.info("Console connector finished.")
