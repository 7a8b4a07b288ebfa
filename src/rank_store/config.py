"""Environment-variable-based configuration."""

import os
from pathlib import Path


def get_db_path() -> Path:
    """Return the database file path from RANK_DB_PATH."""
    raw = os.environ.get("RANK_DB_PATH", "rank.db")
    return Path(raw).expanduser()


def get_busy_timeout() -> float:
    """Return seconds to wait on a locked database from RANK_BUSY_TIMEOUT."""
    return float(os.environ.get("RANK_BUSY_TIMEOUT", "5.0"))


def get_busy_retries() -> int:
    """Return how many times a busy statement is retried from RANK_BUSY_RETRIES."""
    return int(os.environ.get("RANK_BUSY_RETRIES", "3"))


def get_log_level() -> str:
    """Return the logging level from RANK_LOG_LEVEL."""
    return os.environ.get("RANK_LOG_LEVEL", "WARNING")
