"""
Environment-driven settings.

Every value is read at call time so tests (and the CLI) can set variables
before the first use without import-order tricks.
"""

from __future__ import annotations

import os

DEFAULT_POOL_MIN_SIZE = 1
DEFAULT_POOL_MAX_SIZE = 5
DEFAULT_COMMAND_TIMEOUT_S = 30


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def pool_settings() -> tuple[int, int, int]:
    """
    Returns (min_size, max_size, command_timeout).

    - DB_POOL_MIN_SIZE / DB_POOL_MAX_SIZE: asyncpg pool bounds
    - DB_COMMAND_TIMEOUT: per-statement timeout in seconds
    """
    min_size = max(env_int("DB_POOL_MIN_SIZE", DEFAULT_POOL_MIN_SIZE), 0)
    max_size = max(env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE), 1)
    if min_size > max_size:
        min_size = max_size
    command_timeout = env_int("DB_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT_S)
    return min_size, max_size, command_timeout


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def cors_allow_origins() -> list[str]:
    raw = env_str("CORS_ALLOW_ORIGINS", "*")
    origins = [item.strip() for item in raw.split(",")]
    return [item for item in origins if item] or ["*"]
