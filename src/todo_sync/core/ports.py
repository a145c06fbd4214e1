# src/todo_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The repository depends on this Protocol instead of the concrete HTTP client,
which keeps the transport swappable and makes testing easier.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from ..tasks.task_models import TaskDraft, TaskId


class TaskGateway(Protocol):
    """Remote source of truth for tasks (REST: list/create/replace/patch/delete)."""

    async def list(self) -> Any: ...

    async def create(self, draft: TaskDraft) -> Any: ...

    async def replace(self, task_id: TaskId, full: TaskDraft) -> Any: ...

    async def patch(self, task_id: TaskId, partial: Mapping[str, Any]) -> Any: ...

    async def remove(self, task_id: TaskId) -> None: ...
