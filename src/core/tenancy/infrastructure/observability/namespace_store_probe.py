"""Domain probe for schema DDL operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of the namespace store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class NamespaceStoreProbe(Protocol):
    """Domain probe for namespace store operations."""

    def schema_created(self, tenant: str) -> None:
        """Record that a tenant schema was created."""
        ...

    def schema_dropped(self, tenant: str) -> None:
        """Record that a tenant schema was dropped."""
        ...

    def schema_renamed(self, old: str, new: str) -> None:
        """Record that a tenant schema was renamed."""
        ...

    def schemas_listed(self, count: int) -> None:
        """Record that tenant schemas were enumerated."""
        ...

    def ddl_failed(self, operation: str, tenant: str, detail: str) -> None:
        """Record that a schema DDL statement was rejected by the database."""
        ...

    def with_context(self, context: ObservationContext) -> NamespaceStoreProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultNamespaceStoreProbe:
    """Default implementation of NamespaceStoreProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultNamespaceStoreProbe:
        """Create a new probe with observation context bound."""
        return DefaultNamespaceStoreProbe(logger=self._logger, context=context)

    def schema_created(self, tenant: str) -> None:
        self._logger.info(
            "tenant_schema_created",
            tenant=tenant,
            **self._get_context_kwargs(),
        )

    def schema_dropped(self, tenant: str) -> None:
        self._logger.info(
            "tenant_schema_dropped",
            tenant=tenant,
            **self._get_context_kwargs(),
        )

    def schema_renamed(self, old: str, new: str) -> None:
        self._logger.info(
            "tenant_schema_renamed",
            old_tenant=old,
            new_tenant=new,
            **self._get_context_kwargs(),
        )

    def schemas_listed(self, count: int) -> None:
        self._logger.debug(
            "tenant_schemas_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def ddl_failed(self, operation: str, tenant: str, detail: str) -> None:
        self._logger.warning(
            "tenant_schema_ddl_failed",
            operation=operation,
            tenant=tenant,
            detail=detail,
            **self._get_context_kwargs(),
        )
