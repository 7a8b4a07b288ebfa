"""Typed leaderboard store on SQLite."""

from rank_store.database import Database, LifecycleState
from rank_store.db.columns import EMPTY_RECORD, ColumnType, ColumnValue, Record
from rank_store.db.record_range import RecordRange
from rank_store.errors import (
    ColumnCountError,
    ColumnDecodeError,
    ConnectionOpenError,
    CursorMismatchError,
    DatabaseClosedError,
    NullColumnError,
    QueryPrepareError,
    QueryStepError,
    RankStoreError,
    SchemaCreateError,
    UnsupportedColumnTypeError,
    WriteError,
)
from rank_store.logs import configure_logging
from rank_store.models.rank import RankEntry

__all__ = [
    "EMPTY_RECORD",
    "ColumnCountError",
    "ColumnDecodeError",
    "ColumnType",
    "ColumnValue",
    "ConnectionOpenError",
    "CursorMismatchError",
    "Database",
    "DatabaseClosedError",
    "LifecycleState",
    "NullColumnError",
    "QueryPrepareError",
    "QueryStepError",
    "RankEntry",
    "RankStoreError",
    "Record",
    "RecordRange",
    "SchemaCreateError",
    "UnsupportedColumnTypeError",
    "WriteError",
    "configure_logging",
]
