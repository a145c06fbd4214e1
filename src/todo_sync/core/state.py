# src/todo_sync/core/state.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_form import TaskForm
from ..tasks.task_repository import TaskRepository
from ..tasks.task_view import TaskListView, ViewSnapshot
from .ports import TaskGateway

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: Any

    gateway: TaskGateway
    repository: TaskRepository
    view: TaskListView
    form: TaskForm

    background: set[asyncio.Task[Any]] = field(default_factory=set)

    def snapshot(self) -> ViewSnapshot:
        return self.view.snapshot(self.repository)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
        """Run a mutation in the background; the caller stays interactive."""
        task = asyncio.create_task(coro, name=name)
        self.background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        self.background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background operation %s crashed", task.get_name(), exc_info=exc)

    async def drain(self) -> None:
        """Wait for every background mutation to settle."""
        while True:
            pending = [t for t in self.background if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)
