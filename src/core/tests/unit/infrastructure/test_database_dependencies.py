"""Unit tests for the shared engine provider."""

from sqlalchemy.engine import Engine

from infrastructure.database.dependencies import dispose_engine, get_engine


def test_get_engine():
    """Test that get_engine returns a psycopg2 engine."""
    engine = get_engine()

    assert isinstance(engine, Engine)
    assert engine.url.drivername == "postgresql+psycopg2"

    dispose_engine()


def test_engine_is_singleton():
    """Test that the engine is cached and reused."""
    engine_1 = get_engine()
    engine_2 = get_engine()

    assert engine_1 is engine_2

    dispose_engine()


def test_dispose_engine_resets_singleton():
    """After dispose, a new engine is created."""
    engine_1 = get_engine()
    dispose_engine()
    engine_2 = get_engine()

    assert engine_1 is not engine_2

    dispose_engine()


def test_dispose_engine_without_engine_is_noop():
    dispose_engine()
    dispose_engine()
