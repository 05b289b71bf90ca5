"""Application layer for the tenancy bounded context."""

from tenancy.application.results import OperationResult
from tenancy.application.tenant_manager import TenantManager

__all__ = [
    "OperationResult",
    "TenantManager",
]
