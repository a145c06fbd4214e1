# src/todo_sync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is read at import time except the optional .env file.
- Components accept settings by injection; get_settings() is only the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO_SYNC"

DEFAULT_API_BASE_URL = "http://localhost:3001"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def normalize_base_url(raw: str) -> str:
    """Strip trailing slashes so `base + "/tasks"` never becomes `//tasks`."""
    return raw.strip().rstrip("/")


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool
    data_dir: Path

    # ---- Remote task service ----
    api_base_url: str
    request_timeout: float | None

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-sync").strip() or "todo-sync"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        log_to_file = _env_bool(_k("LOG_FILE"), True)
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo_sync"))

        # API_BASE is preferred; API_BASE_URL is accepted for older .env files.
        raw_base = _first_env(_k("API_BASE"), _k("API_BASE_URL"), default=DEFAULT_API_BASE_URL)
        api_base_url = normalize_base_url(raw_base or DEFAULT_API_BASE_URL)

        timeout = _env_float(_k("REQUEST_TIMEOUT"), 0.0)
        request_timeout = timeout if timeout > 0 else None

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            api_base_url=api_base_url,
            request_timeout=request_timeout,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
