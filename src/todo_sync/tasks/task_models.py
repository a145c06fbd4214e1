# src/todo_sync/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

TaskId = int | str

TASK_FIELDS = ("title", "description", "status")


class TaskStatus(StrEnum):
    """Completion status. The remote schema knows exactly these two values."""

    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        """Exact match only; server records must carry the canonical value."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise ValueError(f"Invalid task status: {raw!r}")
        try:
            return cls(raw)
        except ValueError:
            raise ValueError(f"Invalid task status: {raw!r}") from None

    @classmethod
    def from_input(cls, raw: Any) -> TaskStatus:
        """Lenient parse for user input: surrounding blanks and case are ignored."""
        if isinstance(raw, str):
            raw = raw.strip().lower()
        return cls.parse(raw)

    def toggled(self) -> TaskStatus:
        if self is TaskStatus.COMPLETED:
            return TaskStatus.PENDING
        return TaskStatus.COMPLETED


@dataclass(frozen=True, slots=True)
class Task:
    id: TaskId
    title: str
    description: str
    status: TaskStatus

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Task:
        """
        Decode a task record returned by the server.

        The server is authoritative: fields are taken as returned, except that a
        missing/null description becomes "".
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Task payload must be an object, got {type(payload).__name__}")

        task_id = payload.get("id")
        if task_id is None or task_id == "":
            raise ValueError("Task payload has no id")
        if "title" not in payload or payload["title"] is None:
            raise ValueError(f"Task {task_id!r} has no title")

        description = payload.get("description")
        return cls(
            id=task_id,
            title=str(payload["title"]),
            description="" if description is None else str(description),
            status=TaskStatus.parse(payload.get("status")),
        )

    def to_payload(self) -> dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
        }

    def with_status(self, status: TaskStatus) -> Task:
        return replace(self, status=status)


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """Full body for create/replace: all three fields are required by the server."""

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING

    @classmethod
    def from_submission(cls, payload: Mapping[str, Any]) -> TaskDraft:
        """
        Normalize a form submission:
        - title/description trimmed
        - missing/None description -> ""
        - missing/None status -> pending, otherwise parsed case-insensitively
        """
        title = str(payload.get("title") or "").strip()
        description = str(payload.get("description") or "").strip()
        raw_status = payload.get("status")
        status = TaskStatus.PENDING if raw_status in (None, "") else TaskStatus.from_input(raw_status)
        return cls(title=title, description=description, status=status)

    def to_payload(self) -> dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
        }
