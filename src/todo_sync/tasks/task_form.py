# src/todo_sync/tasks/task_form.py

from __future__ import annotations

"""
Add/edit session for a single task.

The form only talks to the repository's create/replace operations. Its error
is scoped to the submission and is separate from the list-level load error.
"""

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any

from ..api.errors import error_message
from .task_models import Task, TaskDraft, TaskStatus
from .task_repository import TaskRepository

logger = logging.getLogger(__name__)

TITLE_REQUIRED = "Title is required."


class FormMode(StrEnum):
    ADD = "add"
    EDIT = "edit"


@dataclass(slots=True)
class FormFields:
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING


class TaskForm:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository
        self.is_open = False
        self.mode = FormMode.ADD
        self.target: Task | None = None
        self.fields = FormFields()
        self.busy = False
        self.error: str | None = None

    def open_add(self) -> None:
        self.error = None
        self.mode = FormMode.ADD
        self.target = None
        self.fields = FormFields()
        self.is_open = True

    def open_edit(self, task: Task) -> None:
        self.error = None
        self.mode = FormMode.EDIT
        self.target = task
        self.fields = FormFields(
            title=task.title or "",
            description=task.description or "",
            status=task.status or TaskStatus.PENDING,
        )
        self.is_open = True

    def close(self) -> bool:
        """Dismiss the session. Refused while a submission is in flight."""
        if self.busy:
            return False
        self.is_open = False
        return True

    async def submit(self, payload: Mapping[str, Any] | None = None) -> bool:
        """
        Submit the session (or an explicit payload with title/description/status).

        Returns True when the server accepted it and the session was closed.
        """
        if not self.is_open or self.busy:
            return False

        if payload is None:
            payload = asdict(self.fields)

        if not str(payload.get("title") or "").strip():
            self.error = TITLE_REQUIRED
            return False
        try:
            draft = TaskDraft.from_submission(payload)
        except ValueError as e:
            self.error = str(e)
            return False

        self.fields = FormFields(title=draft.title, description=draft.description, status=draft.status)
        self.busy = True
        self.error = None
        try:
            if self.mode is FormMode.ADD:
                await self._repository.create(draft)
            else:
                task_id = self.target.id if self.target is not None else None
                if not task_id:
                    raise ValueError("Missing task id")
                await self._repository.replace(task_id, draft)
            self.is_open = False
            return True
        except Exception as e:
            self.error = error_message(e)
            logger.info("Task %s failed: %s", self.mode.value, self.error)
            return False
        finally:
            self.busy = False
