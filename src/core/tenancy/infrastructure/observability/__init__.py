"""Domain probes for tenancy infrastructure."""

from tenancy.infrastructure.observability.migration_probe import (
    DefaultMigrationProbe,
    MigrationProbe,
)
from tenancy.infrastructure.observability.namespace_store_probe import (
    DefaultNamespaceStoreProbe,
    NamespaceStoreProbe,
)

__all__ = [
    "DefaultMigrationProbe",
    "DefaultNamespaceStoreProbe",
    "MigrationProbe",
    "NamespaceStoreProbe",
]
