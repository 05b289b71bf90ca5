"""Tenancy domain: tenant names and the reserved-name rule."""

from tenancy.domain.reserved import ReservedNameValidator
from tenancy.domain.value_objects import MigrationRecord, TenantName

__all__ = [
    "MigrationRecord",
    "ReservedNameValidator",
    "TenantName",
]
