# src/todo_sync/api/client.py

"""
HTTP gateway to the remote task service.

One coroutine per REST verb; every failure is normalized into ApiError.
No retries and no caching at this layer: the repository above decides what a
failure means for local state.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..config import get_settings, normalize_base_url
from ..tasks.task_models import TASK_FIELDS, TaskDraft, TaskId, TaskStatus
from .errors import ApiError

logger = logging.getLogger(__name__)

TaskBody = TaskDraft | Mapping[str, Any]


def _encode_value(value: Any) -> Any:
    if isinstance(value, TaskStatus):
        return value.value
    return value


def _full_body(payload: TaskBody) -> dict[str, Any]:
    """Create/replace bodies must carry title, description and status."""
    if isinstance(payload, TaskDraft):
        return payload.to_payload()
    missing = [f for f in TASK_FIELDS if f not in payload]
    if missing:
        raise ValueError(f"Task body is missing required fields: {', '.join(missing)}")
    return {f: _encode_value(payload[f]) for f in TASK_FIELDS}


def _partial_body(payload: Mapping[str, Any]) -> dict[str, Any]:
    unknown = [k for k in payload if k not in TASK_FIELDS]
    if unknown:
        raise ValueError(f"Unknown task fields in patch: {', '.join(sorted(unknown))}")
    return {k: _encode_value(v) for k, v in payload.items()}


def api_error_from_response(response: httpx.Response) -> ApiError:
    """
    Convert a non-2xx response into ApiError.

    Prefers a server-supplied `detail` or `message` field (FastAPI style); falls
    back to the status line. A body that is not JSON is not an error in itself.
    """
    detail: Any = None
    try:
        detail = response.json()
    except ValueError:
        detail = None

    message: Any = None
    if isinstance(detail, dict):
        message = detail.get("detail") or detail.get("message")
    if not message:
        message = f"Request failed with {response.status_code} {response.reason_phrase}".rstrip()
    if not isinstance(message, str):
        message = json.dumps(message, ensure_ascii=False)

    return ApiError(message, status=response.status_code, detail=detail)


class TasksApiClient:
    """
    Async REST client for /tasks.

    Usage:
        async with TasksApiClient("http://localhost:3001") as api:
            data = await api.list()
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None:
            base_url = get_settings().api_base_url
        self.base_url = normalize_base_url(base_url)
        self._http = httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> TasksApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- low-level ----

    async def _request(self, method: str, path: str, body: Mapping[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        content: bytes | None = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            content = json.dumps(body, ensure_ascii=False).encode("utf-8")

        logger.debug("API %s %s", method, url)
        try:
            response = await self._http.request(method, url, headers=headers, content=content)
        except httpx.TransportError as e:
            logger.info("API %s %s failed: %s", method, url, e.__class__.__name__)
            raise ApiError(str(e).strip() or "Network request failed", status=None) from e

        if not response.is_success:
            err = api_error_from_response(response)
            logger.info("API %s %s -> %s: %s", method, url, response.status_code, err.message)
            raise err

        logger.debug("API %s %s -> %s", method, url, response.status_code)

        if response.status_code == 204:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON in response ({response.status_code})", status=response.status_code
            ) from e

    # ---- REST verbs ----

    async def list(self) -> Any:
        """GET /tasks -> {"tasks": [...]}"""
        return await self._request("GET", "/tasks")

    async def create(self, draft: TaskBody) -> Any:
        """POST /tasks with {title, description, status}; returns the created task."""
        return await self._request("POST", "/tasks", _full_body(draft))

    async def replace(self, task_id: TaskId, full: TaskBody) -> Any:
        """PUT /tasks/{id}: full replace; returns the updated task."""
        return await self._request("PUT", f"/tasks/{task_id}", _full_body(full))

    async def patch(self, task_id: TaskId, partial: Mapping[str, Any]) -> Any:
        """PATCH /tasks/{id} with any subset of {title, description, status}."""
        return await self._request("PATCH", f"/tasks/{task_id}", _partial_body(partial))

    async def remove(self, task_id: TaskId) -> None:
        """DELETE /tasks/{id}; the server answers 204."""
        await self._request("DELETE", f"/tasks/{task_id}")
