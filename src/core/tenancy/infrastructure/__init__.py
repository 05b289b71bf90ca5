"""PostgreSQL implementations for the tenancy bounded context."""

from tenancy.infrastructure.migration_runner import MigrationRunner
from tenancy.infrastructure.migration_scripts import (
    migrations_path,
    shared_migrations_path,
)
from tenancy.infrastructure.namespace_store import NamespaceStore
from tenancy.infrastructure.prefix_injector import (
    Mutation,
    TenantQuery,
    TenantScoped,
    TenantSession,
    put_tenant,
    tenant_session,
)

__all__ = [
    "MigrationRunner",
    "Mutation",
    "NamespaceStore",
    "TenantQuery",
    "TenantScoped",
    "TenantSession",
    "migrations_path",
    "put_tenant",
    "shared_migrations_path",
    "tenant_session",
]
