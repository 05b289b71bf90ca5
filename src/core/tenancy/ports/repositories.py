"""Store interfaces (ports) for the tenancy bounded context.

These protocols define what the tenant manager needs from the database.
The infrastructure layer provides the PostgreSQL implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from tenancy.domain.value_objects import MigrationRecord


@runtime_checkable
class INamespaceStore(Protocol):
    """Schema DDL and catalog lookups.

    Implementations hold no state between calls. Failures raise
    ``TenancyError`` subclasses carrying the native database text.
    """

    def create_schema(self, tenant: str) -> None:
        """Create the schema. Raises DuplicateNamespaceError if present."""
        ...

    def drop_schema(self, tenant: str) -> None:
        """Drop the schema and everything in it.

        Raises NamespaceNotFoundError if the schema is absent.
        """
        ...

    def rename_schema(self, old: str, new: str) -> None:
        """Rename the schema in a single DDL statement."""
        ...

    def list_schemas(self) -> list[str]:
        """Return tenant schema names in lexicographic order."""
        ...

    def schema_exists(self, tenant: str) -> bool:
        """Return True if a non-reserved schema with this name exists."""
        ...


@runtime_checkable
class IMigrationRunner(Protocol):
    """Applies tenant migration scripts to one schema at a time."""

    @property
    def migrations_path(self) -> Path:
        """Directory holding the tenant migration scripts."""
        ...

    def migrate(self, tenant: str) -> list[int]:
        """Apply pending scripts; return the versions applied, ascending."""
        ...

    def rollback(self, tenant: str, steps: int = 1) -> list[int]:
        """Revert the latest applied scripts; return the versions reverted."""
        ...

    def history(self, tenant: str) -> list[MigrationRecord]:
        """Return the tracking rows of the schema, oldest version first."""
        ...

    def pending_versions(self, tenant: str) -> list[int]:
        """Return versions present on disk but not applied to the schema."""
        ...
