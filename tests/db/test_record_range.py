"""Tests for record ranges and scan cursors."""

import sqlite3
from unittest.mock import MagicMock

import pytest

from rank_store.db.columns import EMPTY_RECORD, ColumnType, RowDecoder
from rank_store.db.cursor import ScanCursor, ScanState
from rank_store.db.record_range import RecordRange
from rank_store.errors import (
    CursorMismatchError,
    NullColumnError,
    QueryPrepareError,
    QueryStepError,
    UnsupportedColumnTypeError,
)

PAIR = [ColumnType.TEXT, ColumnType.INTEGER]


@pytest.fixture
def scores(conn):
    """Connection with a small SCORES table."""
    conn.execute("CREATE TABLE SCORES (NAME TEXT, SCORE INT)")
    conn.executemany(
        "INSERT INTO SCORES VALUES (?, ?)",
        [("carol", 30), ("alice", 10), ("bob", 20)],
    )
    return conn


def _spy_close(monkeypatch):
    closed = []
    original = ScanCursor.close

    def spy(self):
        closed.append(self)
        original(self)

    monkeypatch.setattr(ScanCursor, "close", spy)
    return closed


# --- construction ---


def test_construction_does_no_io():
    conn = MagicMock()
    RecordRange(conn, "SELECT nonsense", PAIR)
    conn.execute.assert_not_called()


def test_construction_checks_column_types(conn):
    with pytest.raises(UnsupportedColumnTypeError):
        RecordRange(conn, "SELECT 1", ["blob"])


def test_range_ids_are_unique(conn):
    a = RecordRange(conn, "SELECT 1", [ColumnType.INTEGER])
    b = RecordRange(conn, "SELECT 1", [ColumnType.INTEGER])
    assert a.range_id != b.range_id


# --- iteration ---


def test_iterates_in_query_order(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES ORDER BY SCORE", PAIR)
    assert [r.as_tuple() for r in rng] == [("alice", 10), ("bob", 20), ("carol", 30)]


def test_bound_parameters(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES WHERE SCORE > ?", PAIR, (15,))
    assert {r[0] for r in rng} == {"bob", "carol"}


def test_every_record_has_declared_width(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES", PAIR)
    records = rng.fetch_all()
    assert len(records) == 3
    assert all(len(r) == 2 for r in records)


def test_range_is_restartable(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES ORDER BY SCORE", PAIR)
    assert rng.fetch_all() == rng.fetch_all()


def test_empty_result(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES WHERE SCORE < 0", PAIR)
    visits = 0
    for _ in rng:
        visits += 1
    assert visits == 0


def test_prepare_error_is_raised_on_scan_not_construction(conn):
    rng = RecordRange(conn, "SELECT NAME FROM MISSING", [ColumnType.TEXT])
    with pytest.raises(QueryPrepareError, match="no such table"):
        rng.begin()
    with pytest.raises(QueryPrepareError):
        list(rng)


def test_null_text_fails_loudly(conn):
    conn.execute("CREATE TABLE T (NAME TEXT)")
    conn.execute("INSERT INTO T VALUES (NULL)")
    with pytest.raises(NullColumnError):
        list(RecordRange(conn, "SELECT NAME FROM T", [ColumnType.TEXT]))


def test_abandoned_loop_releases_statement(scores, monkeypatch):
    closed = _spy_close(monkeypatch)
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES", PAIR)
    for _ in rng:
        break
    assert len(closed) == 1
    assert not closed[0].is_live


def test_error_in_loop_body_releases_statement(scores, monkeypatch):
    closed = _spy_close(monkeypatch)
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES", PAIR)
    with pytest.raises(RuntimeError):
        for _ in rng:
            raise RuntimeError("boom")
    assert len(closed) == 1
    assert not closed[0].is_live


# --- cursors ---


def test_begin_positions_on_first_row(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES ORDER BY SCORE", PAIR)
    with rng.begin() as cursor:
        assert cursor.state is ScanState.ROW
        assert cursor.row_index == 0
        assert cursor.record.as_tuple() == ("alice", 10)
        assert cursor != rng.end()


def test_cursor_walks_to_end(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES ORDER BY SCORE", PAIR)
    cursor = rng.begin()
    assert cursor.advance() is ScanState.ROW
    assert cursor.row_index == 1
    assert cursor.advance() is ScanState.ROW
    assert cursor.row_index == 2
    assert cursor.advance() is ScanState.DONE
    assert cursor.record is EMPTY_RECORD
    assert not cursor.is_live
    assert cursor == rng.end()
    # advancing past the end stays DONE
    assert cursor.advance() is ScanState.DONE


def test_row_index_resets_per_scan(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES", PAIR)
    first = rng.begin()
    first.advance()
    first.close()
    second = rng.begin()
    assert second.row_index == 0
    second.close()


def test_begin_on_empty_result_equals_end(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES WHERE 0", PAIR)
    cursor = rng.begin()
    assert cursor.state is ScanState.DONE
    assert cursor.record is EMPTY_RECORD
    assert cursor == rng.end()


def test_end_sentinel_has_no_statement(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES", PAIR)
    end = rng.end()
    assert end.state is ScanState.DONE
    assert not end.is_live
    assert end.range_id == rng.range_id


def test_comparing_cursors_of_different_ranges(scores):
    a = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES", PAIR)
    b = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES", PAIR)
    with pytest.raises(CursorMismatchError):
        _ = a.end() == b.end()


def test_step_error_raises_and_releases():
    statement = MagicMock()
    statement.fetchone.side_effect = sqlite3.OperationalError("disk I/O error")
    cursor = ScanCursor(99, RowDecoder([ColumnType.INTEGER]), statement)
    with pytest.raises(QueryStepError, match="disk I/O error"):
        cursor.advance()
    statement.close.assert_called_once()
    assert cursor.state is ScanState.DONE


def test_step_retries_while_busy(no_backoff, monkeypatch):
    monkeypatch.setenv("RANK_BUSY_RETRIES", "2")
    statement = MagicMock()
    statement.fetchone.side_effect = [sqlite3.OperationalError("database is locked"), (5,)]
    cursor = ScanCursor(99, RowDecoder([ColumnType.INTEGER]), statement)
    assert cursor.advance() is ScanState.ROW
    assert cursor.record.as_tuple() == (5,)


def test_close_is_idempotent(scores):
    rng = RecordRange(scores, "SELECT NAME, SCORE FROM SCORES", PAIR)
    cursor = rng.begin()
    cursor.close()
    cursor.close()
    assert cursor.state is ScanState.DONE
    assert cursor.record is EMPTY_RECORD
