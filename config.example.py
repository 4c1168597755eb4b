# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level; INFO and below only go to the log file (default: INFO).",
    "TODO_DATA_DIR": "Local data directory for logs (default: .local/todo).",
    # Store
    "TODO_API_BASE_URL": "Base URL of the todo store; /todos is appended (default: http://localhost:5000/api).",
    "TODO_OFFLINE_MODE": "Use the in-memory demo store instead of HTTP (default: true only if the base URL is empty).",
    "TODO_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "TODO_READ_TIMEOUT_SECONDS": "HTTP read timeout (default: 25).",
    # UX
    "TODO_CONFIRM_BULK": "Ask before /clear-all and /clear-completed (default: true).",
}
