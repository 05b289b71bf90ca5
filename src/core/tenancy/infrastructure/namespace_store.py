"""PostgreSQL implementation of INamespaceStore.

Each tenant is a schema. This store issues the schema DDL and reads the
schema catalog; it keeps nothing in memory between calls.

No existence check precedes CREATE or DROP. PostgreSQL's own atomicity
decides concurrent calls on the same name: one succeeds, the other gets the
native duplicate/missing-schema error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import column, select, table, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.schema import CreateSchema, DropSchema

from infrastructure.observability import ConnectionProbe, DefaultConnectionProbe
from tenancy.infrastructure.native_errors import (
    connection_error,
    is_connection_failure,
    schema_error,
)
from tenancy.infrastructure.observability import (
    DefaultNamespaceStoreProbe,
    NamespaceStoreProbe,
)
from tenancy.ports.exceptions import NamespaceOperationError
from tenancy.ports.repositories import INamespaceStore

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.sql.expression import Executable

    from tenancy.domain.reserved import ReservedNameValidator

# pg_namespace is the authoritative schema catalog; information_schema
# hides schemas the current role has no privilege on.
_pg_namespace = table("pg_namespace", column("nspname"), schema="pg_catalog")


class NamespaceStore(INamespaceStore):
    """Schema lifecycle and enumeration over a pooled SQLAlchemy engine.

    Every call borrows one connection and runs in its own transaction.
    Reserved names and the shared default schema are never reported as
    tenants.
    """

    def __init__(
        self,
        engine: Engine,
        validator: ReservedNameValidator,
        default_schema: str = "public",
        probe: NamespaceStoreProbe | None = None,
        connection_probe: ConnectionProbe | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            engine: Engine whose pool provides connections
            validator: Reserved-name predicate used to filter the catalog
            default_schema: Shared application schema, never a tenant
            probe: Optional domain probe for observability
            connection_probe: Optional probe for transport failures
        """
        self._engine = engine
        self._validator = validator
        self._default_schema = default_schema
        self._probe = probe or DefaultNamespaceStoreProbe()
        self._connection_probe = connection_probe or DefaultConnectionProbe()

    def create_schema(self, tenant: str) -> None:
        """Issue CREATE SCHEMA.

        Raises:
            DuplicateNamespaceError: If the schema already exists
        """
        self._execute_ddl("create", tenant, CreateSchema(tenant))
        self._probe.schema_created(tenant)

    def drop_schema(self, tenant: str) -> None:
        """Issue DROP SCHEMA ... CASCADE, removing the tenant's tables.

        Raises:
            NamespaceNotFoundError: If the schema does not exist
        """
        self._execute_ddl("drop", tenant, DropSchema(tenant, cascade=True))
        self._probe.schema_dropped(tenant)

    def rename_schema(self, old: str, new: str) -> None:
        """Rename with a single ALTER SCHEMA statement.

        Tables and migration history move with the schema.

        Raises:
            NamespaceNotFoundError: If ``old`` does not exist
            DuplicateNamespaceError: If ``new`` already exists
        """
        quote = self._engine.dialect.identifier_preparer.quote_identifier
        statement = text(f"ALTER SCHEMA {quote(old)} RENAME TO {quote(new)}")
        self._execute_ddl("rename", old, statement)
        self._probe.schema_renamed(old, new)

    def list_schemas(self) -> list[str]:
        """Return tenant schema names, sorted lexicographically."""
        names = self._read_catalog(select(_pg_namespace.c.nspname))
        tenants = sorted(name for name in names if self._is_tenant(name))
        self._probe.schemas_listed(len(tenants))
        return tenants

    def schema_exists(self, tenant: str) -> bool:
        """Look the schema up in the catalog.

        Always False for reserved names and the default schema; the catalog
        is not consulted for them.
        """
        if not self._is_tenant(tenant):
            return False
        stmt = select(_pg_namespace.c.nspname).where(_pg_namespace.c.nspname == tenant)
        return len(self._read_catalog(stmt)) > 0

    def _is_tenant(self, name: str) -> bool:
        return name != self._default_schema and not self._validator.is_reserved(name)

    def _execute_ddl(self, operation: str, tenant: str, statement: Executable) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(statement)
        except DBAPIError as e:
            if is_connection_failure(e):
                self._connection_probe.connection_failed(operation=operation, error=e)
                raise connection_error(e) from e
            error = schema_error(e, default=NamespaceOperationError)
            self._probe.ddl_failed(operation, tenant, error.detail)
            raise error from e

    def _read_catalog(self, statement: Executable) -> list[str]:
        try:
            with self._engine.connect() as conn:
                return list(conn.execute(statement).scalars())
        except DBAPIError as e:
            if is_connection_failure(e):
                self._connection_probe.connection_failed(operation="catalog", error=e)
                raise connection_error(e) from e
            raise
