"""Domain probe for tenant manager operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of the tenant lifecycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantManagerProbe(Protocol):
    """Domain probe for tenant lifecycle operations."""

    def tenant_created(self, tenant: str) -> None:
        """Record that a tenant was provisioned."""
        ...

    def tenant_dropped(self, tenant: str) -> None:
        """Record that a tenant was removed."""
        ...

    def tenant_renamed(self, old: str, new: str) -> None:
        """Record that a tenant was renamed."""
        ...

    def tenant_migrated(self, tenant: str, versions: list[int]) -> None:
        """Record that pending migrations were applied to a tenant."""
        ...

    def tenant_rolled_back(self, tenant: str, versions: list[int]) -> None:
        """Record that migrations were reverted on a tenant."""
        ...

    def reserved_name_rejected(self, operation: str, tenant: str | None) -> None:
        """Record that an operation was refused for a reserved name."""
        ...

    def operation_failed(self, operation: str, tenant: str, detail: str) -> None:
        """Record that an operation returned an error result."""
        ...

    def with_context(self, context: ObservationContext) -> TenantManagerProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantManagerProbe:
    """Default implementation of TenantManagerProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantManagerProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantManagerProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant: str) -> None:
        self._logger.info(
            "tenant_created",
            tenant=tenant,
            **self._get_context_kwargs(),
        )

    def tenant_dropped(self, tenant: str) -> None:
        self._logger.info(
            "tenant_dropped",
            tenant=tenant,
            **self._get_context_kwargs(),
        )

    def tenant_renamed(self, old: str, new: str) -> None:
        self._logger.info(
            "tenant_renamed",
            old_tenant=old,
            new_tenant=new,
            **self._get_context_kwargs(),
        )

    def tenant_migrated(self, tenant: str, versions: list[int]) -> None:
        self._logger.info(
            "tenant_migrated",
            tenant=tenant,
            versions=versions,
            **self._get_context_kwargs(),
        )

    def tenant_rolled_back(self, tenant: str, versions: list[int]) -> None:
        self._logger.info(
            "tenant_rolled_back",
            tenant=tenant,
            versions=versions,
            **self._get_context_kwargs(),
        )

    def reserved_name_rejected(self, operation: str, tenant: str | None) -> None:
        self._logger.warning(
            "tenant_reserved_name_rejected",
            operation=operation,
            tenant=tenant,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, tenant: str, detail: str) -> None:
        self._logger.warning(
            "tenant_operation_failed",
            operation=operation,
            tenant=tenant,
            detail=detail,
            **self._get_context_kwargs(),
        )
