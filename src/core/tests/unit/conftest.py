"""Unit test fixtures with mocked dependencies."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql


class FakeDiag:
    """Stand-in for psycopg2's ``Diagnostics``."""

    def __init__(self, message_primary: str | None):
        self.message_primary = message_primary


class FakePgError(Exception):
    """Stand-in for a psycopg2 error carrying a SQLSTATE."""

    def __init__(self, pgcode: str | None, message: str | None, text: str = ""):
        super().__init__(text or message or "")
        self.pgcode = pgcode
        self.diag = FakeDiag(message)


@pytest.fixture
def fake_pg_error():
    """Factory for driver errors: ``fake_pg_error("42P06", 'schema "x" ...')``."""
    return FakePgError


@pytest.fixture
def mock_engine():
    """Provide a mocked engine plus the connection its transactions yield.

    ``engine.begin()`` and ``engine.connect()`` both yield the same
    connection. The dialect is the real PostgreSQL dialect so identifier
    quoting behaves as in production.
    """
    engine = MagicMock()
    engine.dialect = postgresql.dialect()

    conn = MagicMock()
    for factory in (engine.begin, engine.connect):
        factory.return_value.__enter__ = MagicMock(return_value=conn)
        factory.return_value.__exit__ = MagicMock(return_value=False)

    return engine, conn
