"""Shared test fixtures."""

import pytest

from rank_store.database import Database
from rank_store.db.connection import open_connection


@pytest.fixture
def db():
    """In-memory leaderboard database with the RANK table bootstrapped."""
    database = Database(":memory:")
    yield database
    database.close()


@pytest.fixture
def conn():
    """Bare in-memory SQLite connection, no schema."""
    connection = open_connection(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def db_file(tmp_path):
    """Path for an on-disk database that does not exist yet."""
    return tmp_path / "data" / "rank.db"


@pytest.fixture
def no_backoff(monkeypatch):
    """Make busy retries immediate."""
    monkeypatch.setattr("rank_store.db.connection.time.sleep", lambda _: None)
