"""Domain probes for the tenancy application layer."""

from tenancy.application.observability.tenant_manager_probe import (
    DefaultTenantManagerProbe,
    TenantManagerProbe,
)

__all__ = [
    "DefaultTenantManagerProbe",
    "TenantManagerProbe",
]
