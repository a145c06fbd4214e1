# src/todo_sync/tasks/task_repository.py

from __future__ import annotations

"""
Client-side task repository.

Holds the ordered task collection and reconciles it with the remote service.
Every mutation has the same shape:

    optimistic apply -> remote call -> reconcile (confirm or restore pre-image)

- create/replace are not optimistic: state changes only after the server
  answers, and failures propagate to the caller (the form).
- toggle/delete are optimistic: local state changes first, failures restore the
  captured pre-image verbatim and are published as the load-level error.

Operations on the same id are not serialized: whichever settles last wins.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..api.errors import error_message
from ..core.ports import TaskGateway
from .task_models import Task, TaskDraft, TaskId

logger = logging.getLogger(__name__)


def _decode_task_list(data: Any) -> list[Task]:
    raw = data.get("tasks") if isinstance(data, Mapping) else None
    if not isinstance(raw, list):
        if data is not None:
            logger.warning("Task list response has no 'tasks' array; treating as empty")
        return []

    out: list[Task] = []
    seen: set[TaskId] = set()
    for item in raw:
        try:
            task = Task.from_payload(item)
        except ValueError as e:
            logger.warning("Skipping malformed task record: %s", e)
            continue
        if task.id in seen:
            logger.warning("Skipping duplicate task id=%s", task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return out


class TaskRepository:
    """In-memory task collection kept consistent with a TaskGateway."""

    def __init__(self, gateway: TaskGateway, tasks: Iterable[Task] = ()) -> None:
        self._gateway = gateway
        self._tasks: list[Task] = []
        for t in tasks:
            if t.id and self.get(t.id) is None:
                self._tasks.append(t)
        self._deleting: set[TaskId] = set()

        self.loading = False
        self.load_error: str | None = None

    # ---- read-only views ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def deleting_ids(self) -> frozenset[TaskId]:
        return frozenset(self._deleting)

    def get(self, task_id: TaskId) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def is_deleting(self, task_id: TaskId) -> bool:
        return task_id in self._deleting

    def clear_error(self) -> None:
        self.load_error = None

    # ---- low-level helpers (the only places that touch _tasks) ----

    def _put(self, task: Task) -> None:
        """Overwrite the record with the same id (no-op when it is gone)."""
        self._tasks = [task if t.id == task.id else t for t in self._tasks]

    def _drop(self, task_id: TaskId) -> None:
        self._tasks = [t for t in self._tasks if t.id != task_id]

    def _push_front(self, task: Task) -> None:
        self._tasks = [task, *(t for t in self._tasks if t.id != task.id)]

    def _fail(self, action: str, task_id: TaskId | None, err: Exception) -> None:
        self.load_error = error_message(err)
        logger.warning("%s failed task_id=%s: %s", action, task_id, self.load_error)

    # ---- operations ----

    async def refresh(self) -> None:
        """Replace the whole collection with the server's current list."""
        self.loading = True
        self.load_error = None
        try:
            data = await self._gateway.list()
            self._tasks = _decode_task_list(data)
            logger.info("Loaded %d tasks", len(self._tasks))
        except Exception as e:
            self._fail("refresh", None, e)
        finally:
            self.loading = False

    async def create(self, draft: TaskDraft) -> Task:
        """Create on the server, then insert the returned record at the front."""
        created = Task.from_payload(await self._gateway.create(draft))
        self._push_front(created)
        logger.info("Created task id=%s", created.id)
        return created

    async def replace(self, task_id: TaskId, draft: TaskDraft) -> Task:
        """Full update; the server's representation overwrites the local one."""
        updated = Task.from_payload(await self._gateway.replace(task_id, draft))
        self._put(updated)
        logger.info("Replaced task id=%s", task_id)
        return updated

    async def toggle_status(self, task: Task) -> Task | None:
        """
        Flip pending <-> completed optimistically.

        Returns the server's record, or None after a rollback.
        """
        before = self.get(task.id) or task
        next_status = before.status.toggled()
        self._put(before.with_status(next_status))

        try:
            updated = Task.from_payload(
                await self._gateway.patch(task.id, {"status": next_status.value})
            )
        except Exception as e:
            self._put(before)
            self._fail("toggle", task.id, e)
            return None

        self._put(updated)
        logger.debug("Toggled task id=%s -> %s", task.id, updated.status)
        return updated

    async def delete(self, task: Task) -> bool:
        """
        Remove optimistically; re-insert the pre-image at the front on failure.

        The id stays in the in-flight set until the remote call settles.
        """
        task_id = task.id
        if not task_id:
            return False

        before = self.get(task_id) or task
        self._deleting.add(task_id)
        self._drop(task_id)

        try:
            await self._gateway.remove(task_id)
        except Exception as e:
            self._push_front(before)
            self._fail("delete", task_id, e)
            return False
        finally:
            self._deleting.discard(task_id)

        logger.info("Deleted task id=%s", task_id)
        return True
