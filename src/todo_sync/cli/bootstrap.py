# src/todo_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the HTTP gateway, repository, view and form into AppState.
"""

from __future__ import annotations

import logging

from ..api.client import TasksApiClient
from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_form import TaskForm
from ..tasks.task_repository import TaskRepository
from ..tasks.task_view import TaskListView

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, transport=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    gateway = TasksApiClient(
        settings.api_base_url,
        timeout=settings.request_timeout,
        transport=transport,
    )
    repository = TaskRepository(gateway)
    logger.info("Task service: %s", gateway.base_url)

    return AppState(
        settings=settings,
        gateway=gateway,
        repository=repository,
        view=TaskListView(),
        form=TaskForm(repository),
    )


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown: settle background mutations, then close the HTTP client."""
    try:
        await state.drain()
    except Exception:
        logger.exception("Failed to settle background operations.")

    aclose = getattr(state.gateway, "aclose", None)
    if aclose is not None:
        try:
            await aclose()
        except Exception:
            logger.debug("HTTP client close failed.", exc_info=True)
