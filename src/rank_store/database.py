"""Leaderboard database facade.

Owns the SQLite connection, bootstraps the RANK table on construction and
exposes the two leaderboard operations. Reads surface errors to the caller;
writes log them and report failure as ``False``.
"""

from __future__ import annotations

import logging
import sqlite3
from enum import StrEnum
from pathlib import Path
from types import TracebackType

from pydantic import ValidationError

from rank_store.config import get_db_path
from rank_store.db.columns import ColumnType
from rank_store.db.connection import open_connection, retry_on_busy
from rank_store.db.record_range import RecordRange
from rank_store.db.schema import bootstrap
from rank_store.errors import DatabaseClosedError, WriteError
from rank_store.models.rank import RankEntry

logger = logging.getLogger(__name__)

RANKS_SQL = "SELECT NAME, SCORE FROM RANK ORDER BY SCORE"
RANK_COLUMNS = (ColumnType.TEXT, ColumnType.INTEGER)
INSERT_RANK_SQL = "INSERT INTO RANK (NAME, SCORE) VALUES (?, ?)"


class LifecycleState(StrEnum):
    """Connection lifecycle of a Database."""

    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class Database:
    """The leaderboard store.

    Construction opens the file and creates the RANK table if missing; any
    failure there (ConnectionOpenError, SchemaCreateError) aborts construction
    and leaves no open connection behind. Not safe for concurrent use: one
    thread, one scan at a time. Host applications call
    ``rank_store.configure_logging()`` once to see its log output.
    """

    def __init__(self, db_path: Path | str | None = None) -> None:
        """Open the store at ``db_path`` (default RANK_DB_PATH) and bootstrap it."""
        self._state = LifecycleState.UNOPENED
        self.db_path = str(db_path if db_path is not None else get_db_path())
        self._conn = open_connection(self.db_path)
        self._state = LifecycleState.OPEN
        logger.info("Opened rank database at %s", self.db_path)
        try:
            bootstrap(self._conn)
        except BaseException:
            self._conn.close()
            self._state = LifecycleState.CLOSED
            raise

    @property
    def state(self) -> LifecycleState:
        """Current lifecycle state."""
        return self._state

    def _require_open(self) -> sqlite3.Connection:
        if self._state is not LifecycleState.OPEN:
            raise DatabaseClosedError(f"database {self.db_path} is {self._state}")
        return self._conn

    def get_ranks(self, size: int = 0) -> RecordRange:
        """Return a lazy range of (name, score) records, lowest score first.

        ``size`` is accepted for callers that pass a page size but does not
        limit the scan. The range borrows this database's connection and must
        not be used after ``close()``.
        """
        conn = self._require_open()
        if size:
            logger.debug("get_ranks size hint %d ignored", size)
        return RecordRange(conn, RANKS_SQL, RANK_COLUMNS)

    def get_rank_entries(self, size: int = 0) -> list[RankEntry]:
        """Run one get_ranks scan and return it as RankEntry models."""
        return [RankEntry.from_record(record) for record in self.get_ranks(size)]

    def _insert_rank(self, name: str, score: int) -> None:
        conn = self._require_open()
        try:
            entry = RankEntry(name=name, score=score)
        except ValidationError as exc:
            raise WriteError(f"invalid rank entry: {exc.errors()[0]['msg']}") from exc
        try:
            retry_on_busy(lambda: conn.execute(INSERT_RANK_SQL, (entry.name, entry.score)))
        except (sqlite3.Error, OverflowError, UnicodeEncodeError) as exc:
            raise WriteError(str(exc)) from exc

    def put_rank(self, name: str, score: int) -> bool:
        """Insert one leaderboard row. Returns False (and logs why) on failure."""
        try:
            self._insert_rank(name, score)
        except WriteError as exc:
            logger.error("Failed to store rank for %r: %s", name, exc.message)
            return False
        return True

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._state is not LifecycleState.OPEN:
            self._state = LifecycleState.CLOSED
            return
        self._state = LifecycleState.CLOSED
        try:
            self._conn.close()
        except sqlite3.Error as exc:
            logger.warning("Database %s did not close cleanly: %s", self.db_path, exc)
            raise AssertionError(f"unclean close of {self.db_path}: {exc}") from exc
        logger.info("Closed rank database at %s", self.db_path)

    def __enter__(self) -> Database:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
