"""Current tenant for the running unit of work.

The active tenant lives in a ``ContextVar``: every thread and every asyncio
task sees its own value, so concurrently running units of work never observe
each other's tenant. Nothing here resolves the tenant from a request; callers
set it explicitly when a unit of work starts.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_current_tenant: ContextVar[str | None] = ContextVar("current_tenant", default=None)


def put_current_tenant(tenant: str | None) -> None:
    """Set the tenant for the current unit of work.

    Passing None clears it.
    """
    if tenant is not None and not isinstance(tenant, str):
        raise TypeError(f"tenant must be a string, got {type(tenant).__name__}")
    _current_tenant.set(tenant)


def current_tenant() -> str | None:
    """Return the tenant set for the current unit of work, if any."""
    return _current_tenant.get()


def clear_current_tenant() -> None:
    """Forget the tenant of the current unit of work."""
    _current_tenant.set(None)


@contextmanager
def tenant_scope(tenant: str) -> Iterator[str]:
    """Set the current tenant for the duration of a ``with`` block.

    The previous value is restored on exit, even when the block raises.

    Example:
        with tenant_scope("acme"):
            handle_job()
    """
    if not isinstance(tenant, str):
        raise TypeError(f"tenant must be a string, got {type(tenant).__name__}")
    token = _current_tenant.set(tenant)
    try:
        yield tenant
    finally:
        _current_tenant.reset(token)
