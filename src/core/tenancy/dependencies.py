"""Wiring for the tenancy bounded context.

Builds the tenant manager from settings and the shared engine. Pass an
engine or settings explicitly to target another database (tests do).
Every probe is bound to one observation context, so all events of a unit
of work carry the same metadata.
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from infrastructure.database.dependencies import get_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import TenancySettings, get_tenancy_settings
from shared_kernel.observability_context import ObservationContext
from shared_kernel.tenant_context import current_tenant
from tenancy.application import TenantManager
from tenancy.application.observability import DefaultTenantManagerProbe
from tenancy.domain.reserved import ReservedNameValidator
from tenancy.infrastructure import (
    MigrationRunner,
    NamespaceStore,
    migrations_path,
)
from tenancy.infrastructure.observability import (
    DefaultMigrationProbe,
    DefaultNamespaceStoreProbe,
)


def get_reserved_name_validator(
    settings: TenancySettings | None = None,
) -> ReservedNameValidator:
    """Build the reserved-name predicate from configuration."""
    settings = settings or get_tenancy_settings()
    return ReservedNameValidator(
        names=settings.reserved_tenants,
        patterns=settings.reserved_patterns,
    )


def get_tenant_manager(
    engine: Engine | None = None,
    settings: TenancySettings | None = None,
    context: ObservationContext | None = None,
) -> TenantManager:
    """Build a TenantManager over the given (or shared) engine.

    Args:
        engine: Engine to use; defaults to the process-wide engine
        settings: Tenancy settings; defaults to the cached environment settings
        context: Metadata bound to every probe; defaults to the current tenant

    Returns:
        TenantManager ready for use
    """
    engine = engine or get_engine()
    settings = settings or get_tenancy_settings()
    validator = get_reserved_name_validator(settings)
    context = context or ObservationContext(tenant_id=current_tenant())
    connection_probe = DefaultConnectionProbe().with_context(context)

    store = NamespaceStore(
        engine,
        validator,
        default_schema=settings.default_schema,
        probe=DefaultNamespaceStoreProbe().with_context(context),
        connection_probe=connection_probe,
    )
    runner = MigrationRunner(
        engine,
        migrations_path(settings),
        table_name=settings.migrations_table,
        probe=DefaultMigrationProbe().with_context(context),
        connection_probe=connection_probe,
    )
    return TenantManager(
        store=store,
        runner=runner,
        validator=validator,
        probe=DefaultTenantManagerProbe().with_context(context),
    )
