"""Restartable lazy sequence of typed records for one query."""

from __future__ import annotations

import itertools
import logging
import sqlite3
from collections.abc import Iterator, Sequence
from typing import Any

from rank_store.db.columns import ColumnType, Record, RowDecoder
from rank_store.db.connection import retry_on_busy
from rank_store.db.cursor import ScanCursor, ScanState
from rank_store.errors import QueryPrepareError

logger = logging.getLogger(__name__)

_range_ids = itertools.count(1)


class RecordRange:
    """A query bound to a borrowed connection.

    Nothing touches the database until a scan starts. Every ``begin()`` (and so
    every ``for`` loop) prepares the statement afresh, so the range can be
    scanned any number of times; each individual scan is forward-only. The
    connection must outlive the range.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        sql: str,
        column_types: Sequence[ColumnType | str],
        params: Sequence[Any] = (),
    ) -> None:
        """Initialize; column types are checked here, no I/O happens."""
        self._conn = conn
        self.sql = str(sql)
        self.params = tuple(params)
        self.decoder = RowDecoder(column_types)
        self.range_id = next(_range_ids)

    @property
    def column_types(self) -> tuple[ColumnType, ...]:
        """Declared column types, in order."""
        return self.decoder.column_types

    def begin(self) -> ScanCursor:
        """Prepare the statement and step to the first row.

        Returns a cursor at the first row, or already DONE for an empty result.
        Raises QueryPrepareError if the engine rejects the statement.
        """
        try:
            statement = retry_on_busy(lambda: self._conn.execute(self.sql, self.params))
        except sqlite3.Error as exc:
            raise QueryPrepareError(str(exc)) from exc
        logger.debug("Range %d scan started: %s", self.range_id, self.sql)
        cursor = ScanCursor(self.range_id, self.decoder, statement)
        cursor.advance()
        return cursor

    def end(self) -> ScanCursor:
        """Return the end-of-sequence sentinel for this range."""
        return ScanCursor(self.range_id, self.decoder)

    def __iter__(self) -> Iterator[Record]:
        cursor = self.begin()
        try:
            while cursor.state is ScanState.ROW:
                yield cursor.record
                cursor.advance()
        finally:
            cursor.close()

    def fetch_all(self) -> list[Record]:
        """Run one full scan and return every record."""
        return list(self)

    def __repr__(self) -> str:
        return f"RecordRange(range_id={self.range_id}, sql={self.sql!r})"
