# src/todo_sync/api/errors.py

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """
    Normalized failure of a remote call.

    - status is the HTTP status code, or None when the request never completed
      (connection refused, DNS failure, timeout, ...)
    - detail is the parsed JSON error body when there was one
    """

    def __init__(self, message: str, *, status: int | None = None, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.detail = detail

    @property
    def is_network_error(self) -> bool:
        return self.status is None

    def __repr__(self) -> str:
        return f"ApiError(message={self.message!r}, status={self.status!r})"


def error_message(err: BaseException | str | None) -> str:
    """Turn any failure into a short user-facing string."""
    if err is None:
        return "Unknown error"
    if isinstance(err, str):
        return err
    if isinstance(err, ApiError):
        return err.message or "Request failed"
    return str(err).strip() or "Request failed"
