"""Scan cursor: one prepared statement walked forward row by row."""

from __future__ import annotations

import logging
import sqlite3
from enum import StrEnum
from types import TracebackType
from typing import Any

from rank_store.db.columns import EMPTY_RECORD, Record, RowDecoder
from rank_store.db.connection import retry_on_busy
from rank_store.errors import CursorMismatchError, QueryStepError

logger = logging.getLogger(__name__)


class ScanState(StrEnum):
    """Position of a cursor within its scan."""

    NOT_STARTED = "not_started"
    ROW = "row"
    DONE = "done"


class ScanCursor:
    """Forward-only cursor over one scan of a RecordRange.

    Owns the underlying statement and releases it on exhaustion, ``close()``,
    or leaving a ``with`` block. A cursor built without a statement is the
    end-of-sequence sentinel for its range.
    """

    def __init__(
        self,
        range_id: int,
        decoder: RowDecoder,
        statement: sqlite3.Cursor | None = None,
    ) -> None:
        """Initialize; a live cursor starts NOT_STARTED, the sentinel starts DONE."""
        self.range_id = range_id
        self._decoder = decoder
        self._statement = statement
        self._row: Any = None
        self._record: Record | None = None
        self.row_index = -1
        self.state = ScanState.NOT_STARTED if statement is not None else ScanState.DONE

    @property
    def is_live(self) -> bool:
        """True while the cursor still holds its statement."""
        return self._statement is not None

    def advance(self) -> ScanState:
        """Step the statement once. Returns ROW or DONE.

        Advancing an exhausted cursor is a no-op. Engine errors raise
        QueryStepError and release the statement.
        """
        if self._statement is None:
            self.state = ScanState.DONE
            return self.state
        statement = self._statement
        try:
            row = retry_on_busy(statement.fetchone)
        except sqlite3.Error as exc:
            self.close()
            raise QueryStepError(str(exc)) from exc

        self._record = None
        if row is None:
            self._row = None
            logger.debug("Range %d scan finished after %d rows", self.range_id, self.row_index + 1)
            self.close()
        else:
            self._row = row
            self.row_index += 1
            self.state = ScanState.ROW
        return self.state

    @property
    def record(self) -> Record:
        """The decoded current row, or EMPTY_RECORD when not on a row."""
        if self.state is not ScanState.ROW:
            return EMPTY_RECORD
        if self._record is None:
            self._record = self._decoder.decode(self._row)
        return self._record

    def close(self) -> None:
        """Release the statement. Safe to call repeatedly."""
        statement, self._statement = self._statement, None
        self.state = ScanState.DONE
        self._row = None
        if statement is None:
            return
        try:
            statement.close()
        except sqlite3.ProgrammingError:
            # connection already closed, which finalizes its statements
            logger.debug("Range %d statement outlived its connection", self.range_id)

    def __enter__(self) -> ScanCursor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScanCursor):
            return NotImplemented
        if other.range_id != self.range_id:
            raise CursorMismatchError(
                f"cannot compare cursors of range {self.range_id} and range {other.range_id}"
            )
        if self.state is ScanState.DONE and other.state is ScanState.DONE:
            return True
        return self is other

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        return f"ScanCursor(range_id={self.range_id}, state={self.state}, row_index={self.row_index})"
