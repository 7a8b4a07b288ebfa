"""SQLite connection management and busy handling."""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from rank_store.config import get_busy_retries, get_busy_timeout
from rank_store.errors import ConnectionOpenError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BUSY_CODES = {sqlite3.SQLITE_BUSY, sqlite3.SQLITE_LOCKED}
_BACKOFF_SECONDS = 0.05


def open_connection(db_path: Path | str) -> sqlite3.Connection:
    """Open (creating if needed) the database file.

    For in-memory databases, pass ":memory:". Writes autocommit.
    """
    db_path = str(db_path)
    try:
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path, timeout=get_busy_timeout(), isolation_level=None)
        # connect() is lazy about the file; touch it so a bad path fails here
        conn.execute("PRAGMA schema_version")
    except (sqlite3.Error, OSError) as exc:
        raise ConnectionOpenError(f"cannot open database {db_path}: {exc}") from exc
    return conn


def is_busy(exc: sqlite3.Error) -> bool:
    """Return True if the engine reported a busy or locked database."""
    if getattr(exc, "sqlite_errorcode", None) in _BUSY_CODES:
        return True
    text = str(exc).lower()
    return "database is locked" in text or "database is busy" in text


def retry_on_busy(op: Callable[[], T], *, retries: int | None = None) -> T:
    """Run ``op``, retrying with linear back-off while the database is busy.

    Non-busy errors, and the last busy error once retries run out, propagate.
    """
    attempts = get_busy_retries() if retries is None else retries
    attempt = 0
    while True:
        try:
            return op()
        except sqlite3.OperationalError as exc:
            if attempt >= attempts or not is_busy(exc):
                raise
            attempt += 1
            logger.debug("Database busy, retry %d/%d", attempt, attempts)
            time.sleep(_BACKOFF_SECONDS * attempt)
