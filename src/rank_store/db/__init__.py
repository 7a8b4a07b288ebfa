"""Typed query layer over SQLite: row decoding, record ranges, bootstrap."""

from rank_store.db.columns import (
    EMPTY_RECORD,
    ColumnType,
    ColumnValue,
    Record,
    RowDecoder,
)
from rank_store.db.connection import open_connection
from rank_store.db.cursor import ScanCursor, ScanState
from rank_store.db.record_range import RecordRange

__all__ = [
    "EMPTY_RECORD",
    "ColumnType",
    "ColumnValue",
    "Record",
    "RecordRange",
    "RowDecoder",
    "ScanCursor",
    "ScanState",
    "open_connection",
]
