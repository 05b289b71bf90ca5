"""Tenancy bounded context: one PostgreSQL schema per tenant.

Typical use:

    from tenancy import get_tenant_manager, put_tenant, TenantQuery

    manager = get_tenant_manager()
    status, detail = manager.create("acme")
    query = put_tenant(TenantQuery.from_(Note), "acme")
"""

from shared_kernel.tenant_context import (
    clear_current_tenant,
    current_tenant,
    put_current_tenant,
    tenant_scope,
)
from tenancy.application import OperationResult, TenantManager
from tenancy.dependencies import get_tenant_manager
from tenancy.infrastructure import (
    Mutation,
    TenantQuery,
    TenantScoped,
    TenantSession,
    migrations_path,
    put_tenant,
    tenant_session,
)

__all__ = [
    "Mutation",
    "OperationResult",
    "TenantManager",
    "TenantQuery",
    "TenantScoped",
    "TenantSession",
    "clear_current_tenant",
    "current_tenant",
    "get_tenant_manager",
    "migrations_path",
    "put_current_tenant",
    "put_tenant",
    "tenant_scope",
    "tenant_session",
]
