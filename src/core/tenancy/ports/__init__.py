"""Ports (interfaces) for the tenancy bounded context.

Ports define the contracts for schema storage, migrations and namespace
qualification without specifying implementation details.
"""

from tenancy.ports.exceptions import (
    DuplicateNamespaceError,
    InvalidTenantNameError,
    MigrationFailedError,
    MigrationScriptError,
    NamespaceNotFoundError,
    NamespaceOperationError,
    ReservedNameError,
    TenancyError,
    TenantRoutingError,
)
from tenancy.ports.qualifiable import NamespaceQualifiable
from tenancy.ports.repositories import IMigrationRunner, INamespaceStore

__all__ = [
    "DuplicateNamespaceError",
    "IMigrationRunner",
    "INamespaceStore",
    "InvalidTenantNameError",
    "MigrationFailedError",
    "MigrationScriptError",
    "NamespaceNotFoundError",
    "NamespaceOperationError",
    "NamespaceQualifiable",
    "ReservedNameError",
    "TenancyError",
    "TenantRoutingError",
]
