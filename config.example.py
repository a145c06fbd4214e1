# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/todo_sync/config.py for parsing rules.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_SYNC_APP_NAME": "App display name (default: todo-sync).",
    "TODO_SYNC_LOG_LEVEL": "Console logging level (default: INFO).",
    "TODO_SYNC_LOG_FILE": "Write full debug log to <data_dir>/todo_sync.log (true/false, default: true).",
    "TODO_SYNC_DATA_DIR": "Local data directory for logs (default: .local/todo_sync).",
    # Remote task service
    "TODO_SYNC_API_BASE": "REST base URL (default: http://localhost:3001). Trailing slashes are stripped.",
    "TODO_SYNC_API_BASE_URL": "Older name for TODO_SYNC_API_BASE; used only when the former is unset.",
    "TODO_SYNC_REQUEST_TIMEOUT": "HTTP timeout in seconds; 0 or negative disables it (default: 0).",
}
