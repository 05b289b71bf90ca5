"""Domain probe for tenant migration runs.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events while scripts are applied to a tenant schema.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MigrationProbe(Protocol):
    """Domain probe for migration runner operations."""

    def migration_applied(self, tenant: str, version: int, name: str) -> None:
        """Record that one script was applied and recorded."""
        ...

    def migration_reverted(self, tenant: str, version: int, name: str) -> None:
        """Record that one script was rolled back and unrecorded."""
        ...

    def migration_failed(self, tenant: str, version: int, detail: str) -> None:
        """Record that a script failed; the run stops here."""
        ...

    def run_completed(self, tenant: str, versions: list[int]) -> None:
        """Record the outcome of a migrate or rollback run."""
        ...

    def with_context(self, context: ObservationContext) -> MigrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMigrationProbe:
    """Default implementation of MigrationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultMigrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultMigrationProbe(logger=self._logger, context=context)

    def migration_applied(self, tenant: str, version: int, name: str) -> None:
        self._logger.info(
            "tenant_migration_applied",
            tenant=tenant,
            version=version,
            migration=name,
            **self._get_context_kwargs(),
        )

    def migration_reverted(self, tenant: str, version: int, name: str) -> None:
        self._logger.info(
            "tenant_migration_reverted",
            tenant=tenant,
            version=version,
            migration=name,
            **self._get_context_kwargs(),
        )

    def migration_failed(self, tenant: str, version: int, detail: str) -> None:
        self._logger.error(
            "tenant_migration_failed",
            tenant=tenant,
            version=version,
            detail=detail,
            **self._get_context_kwargs(),
        )

    def run_completed(self, tenant: str, versions: list[int]) -> None:
        self._logger.debug(
            "tenant_migration_run_completed",
            tenant=tenant,
            versions=versions,
            count=len(versions),
            **self._get_context_kwargs(),
        )
