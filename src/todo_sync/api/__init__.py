"""
REST gateway.

Components:
- client.py: TasksApiClient (httpx) with one coroutine per verb
- errors.py: ApiError and user-facing message normalization
"""

from .client import TasksApiClient
from .errors import ApiError, error_message

__all__ = ["ApiError", "TasksApiClient", "error_message"]
