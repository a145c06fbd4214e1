# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_sync.core.state import AppState
from todo_sync.tasks.task_form import TaskForm
from todo_sync.tasks.task_models import Task, TaskStatus
from todo_sync.tasks.task_repository import TaskRepository
from todo_sync.tasks.task_view import TaskListView

from .fakes import FakeTaskGateway


def make_task(
    task_id: int | str,
    title: str = "Task",
    description: str = "",
    status: TaskStatus | str = TaskStatus.PENDING,
) -> Task:
    return Task(id=task_id, title=title, description=description, status=TaskStatus(status))


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-sync-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=tmp_path / "data",
        api_base_url="http://tasks.test",
        request_timeout=None,
    )


@pytest.fixture()
def gateway() -> FakeTaskGateway:
    return FakeTaskGateway(
        [
            {"id": 3, "title": "Buy milk", "description": "", "status": "pending"},
            {"id": 7, "title": "X", "description": "", "status": "pending"},
            {"id": 9, "title": "Call Bob", "description": "about the car", "status": "completed"},
        ]
    )


@pytest.fixture()
def repository(gateway: FakeTaskGateway) -> TaskRepository:
    """Repository pre-seeded with the same records the fake server holds."""
    return TaskRepository(gateway, [Task.from_payload(r) for r in gateway.records.values()])


@pytest.fixture()
def state(settings: SimpleNamespace, gateway: FakeTaskGateway, repository: TaskRepository) -> AppState:
    return AppState(
        settings=settings,
        gateway=gateway,
        repository=repository,
        view=TaskListView(),
        form=TaskForm(repository),
    )
