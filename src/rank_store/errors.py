"""Error taxonomy for the rank store.

Construction errors (open, schema bootstrap) are fatal to the facade. Read-path
errors propagate to the caller; write-path errors are logged and reported as a
boolean by ``Database.put_rank``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rank_store.db.columns import ColumnType


class RankStoreError(Exception):
    """Base class for all rank store errors."""

    def __init__(self, message: str) -> None:
        """Initialize with the engine diagnostic or a description of the defect."""
        super().__init__(message)
        self.message = message


class ConnectionOpenError(RankStoreError):
    """The backing store could not be opened or created."""


class SchemaCreateError(RankStoreError):
    """Bootstrap could not create the RANK table."""


class QueryPrepareError(RankStoreError):
    """A statement could not be prepared (bad SQL or engine error)."""


class QueryStepError(RankStoreError):
    """The engine failed while advancing a live cursor."""


class WriteError(RankStoreError):
    """An insert was rejected by the engine."""


class DatabaseClosedError(RankStoreError):
    """An operation was attempted on a closed database."""


class CursorMismatchError(RankStoreError):
    """Two cursors from different ranges were compared."""


class UnsupportedColumnTypeError(RankStoreError):
    """A column type with no registered decoding rule was declared."""


class ColumnDecodeError(RankStoreError):
    """A cell could not be decoded into its declared column type."""

    def __init__(
        self,
        message: str,
        *,
        ordinal: int | None = None,
        column_type: ColumnType | None = None,
    ) -> None:
        """Initialize with the offending column ordinal and declared type."""
        super().__init__(message)
        self.ordinal = ordinal
        self.column_type = column_type


class NullColumnError(ColumnDecodeError):
    """SQL NULL was read into a non-null typed column."""


class ColumnCountError(ColumnDecodeError):
    """A row's width differs from the declared column count."""
