"""DDL and one-time bootstrap for the RANK table."""

import logging
import sqlite3

from rank_store.db.columns import ColumnType
from rank_store.db.record_range import RecordRange
from rank_store.errors import SchemaCreateError

logger = logging.getLogger(__name__)

RANK_TABLE = "RANK"

CATALOG_PROBE_SQL = "SELECT name FROM sqlite_master WHERE type='table' AND name='RANK';"

CREATE_RANK_SQL = (
    "CREATE TABLE RANK("
    "ID INTEGER PRIMARY KEY AUTOINCREMENT, "
    "NAME TEXT NOT NULL, "
    "SCORE INT NOT NULL)"
)


def rank_table_exists(conn: sqlite3.Connection) -> bool:
    """Probe the schema catalog for the RANK table."""
    for (name,) in RecordRange(conn, CATALOG_PROBE_SQL, [ColumnType.TEXT]):
        assert name == RANK_TABLE, f"catalog probe returned {name!r}"
        return True
    return False


def bootstrap(conn: sqlite3.Connection) -> bool:
    """Create the RANK table unless it already exists.

    Returns True if the table was created. Raises SchemaCreateError if the
    engine rejects the DDL.
    """
    if rank_table_exists(conn):
        logger.debug("RANK table already present")
        return False
    try:
        conn.execute(CREATE_RANK_SQL)
    except sqlite3.Error as exc:
        raise SchemaCreateError(str(exc)) from exc
    logger.info("Created RANK table")
    return True
