"""Shared engine provisioning.

Every tenant operation borrows a connection from one process-wide engine
pool. The engine is created lazily on first use.
"""

from __future__ import annotations

import threading

from sqlalchemy.engine import Engine

from infrastructure.database.engines import create_tenancy_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine instance (created on first use)
_engine: Engine | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_engine() -> Engine:
    """Get the database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.

    Returns:
        Configured engine for tenant DDL and migrations
    """
    global _engine
    if _engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _engine is None:
                settings = get_database_settings()
                _engine = create_tenancy_engine(settings)
                _probe.pool_initialized(
                    min_conn=settings.pool_min_connections,
                    max_conn=settings.pool_max_connections,
                )
    return _engine


def dispose_engine() -> None:
    """Close all pooled connections and forget the engine.

    Should be called on shutdown. A later ``get_engine()`` creates a new one.
    """
    global _engine

    with _engine_lock:
        if _engine is not None:
            _engine.dispose()
            _probe.pool_closed()
            _engine = None
