# src/todo_sync/tasks/task_view.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .task_models import Task, TaskId, TaskStatus

if TYPE_CHECKING:
    from .task_repository import TaskRepository


class FilterMode(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class TaskFilter:
    mode: FilterMode = FilterMode.ALL
    query: str = ""


@dataclass(frozen=True, slots=True)
class TaskCounts:
    total: int
    pending: int
    completed: int


@dataclass(frozen=True, slots=True)
class TaskRow:
    task: Task
    deleting: bool


@dataclass(frozen=True, slots=True)
class ViewSnapshot:
    """Everything a front-end needs to render the list."""

    rows: tuple[TaskRow, ...]
    counts: TaskCounts
    task_filter: TaskFilter
    load_error: str | None
    loading: bool

    @property
    def shown(self) -> int:
        return len(self.rows)


def _id_sort_key(task_id: TaskId | None) -> tuple[int, int, str]:
    # Falsy ids rank lowest, then numbers (and digit strings), then other strings.
    if not task_id:
        return (0, 0, "")
    if isinstance(task_id, int):
        return (1, task_id, "")
    text = str(task_id)
    if text.isdigit():
        return (1, int(text), "")
    return (2, 0, text)


def _matches_mode(task: Task, mode: FilterMode) -> bool:
    if mode is FilterMode.PENDING:
        return task.status is TaskStatus.PENDING
    if mode is FilterMode.COMPLETED:
        return task.status is TaskStatus.COMPLETED
    return True


def _matches_query(task: Task, query: str) -> bool:
    if not query:
        return True
    return query in (task.title or "").lower() or query in (task.description or "").lower()


def project_tasks(tasks: Iterable[Task], task_filter: TaskFilter) -> list[Task]:
    """
    Filtered + sorted list for display. Pure: same input, same output.

    Order: pending before completed; inside each group, newest (highest) id first.
    """
    query = task_filter.query.strip().lower()
    visible = [t for t in tasks if _matches_mode(t, task_filter.mode) and _matches_query(t, query)]
    visible.sort(key=lambda t: _id_sort_key(t.id), reverse=True)
    # Stable second pass: status partition keeps the id order within each group.
    visible.sort(key=lambda t: t.status is not TaskStatus.PENDING)
    return visible


def count_tasks(tasks: Sequence[Task]) -> TaskCounts:
    pending = sum(1 for t in tasks if t.status is TaskStatus.PENDING)
    completed = sum(1 for t in tasks if t.status is TaskStatus.COMPLETED)
    return TaskCounts(total=len(tasks), pending=pending, completed=completed)


class TaskListView:
    """Owns the ephemeral filter state and derives snapshots from the repository."""

    def __init__(self, task_filter: TaskFilter | None = None) -> None:
        self.task_filter = task_filter or TaskFilter()

    def set_filter(self, mode: FilterMode | str) -> None:
        self.task_filter = TaskFilter(mode=FilterMode(mode), query=self.task_filter.query)

    def set_query(self, query: str) -> None:
        self.task_filter = TaskFilter(mode=self.task_filter.mode, query=query)

    def snapshot(self, repository: TaskRepository) -> ViewSnapshot:
        tasks = repository.tasks
        rows = tuple(
            TaskRow(task=t, deleting=repository.is_deleting(t.id))
            for t in project_tasks(tasks, self.task_filter)
        )
        return ViewSnapshot(
            rows=rows,
            counts=count_tasks(tasks),
            task_filter=self.task_filter,
            load_error=repository.load_error,
            loading=repository.loading,
        )
