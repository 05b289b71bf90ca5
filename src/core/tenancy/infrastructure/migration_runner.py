"""Tenant-scoped migration runner.

Applies the scripts of the tenant migration tree to one schema. Every
schema keeps its own tracking table, so migration history is never shared
between tenants and travels with a schema when it is renamed.

Each script runs in its own transaction with ``search_path`` narrowed to the
tenant schema, and its version row is inserted in that same transaction.
A failing script stops the run; scripts applied before it stay applied.
The tracking table is created by the first migrate of a schema; reading
history never writes.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    MetaData,
    Table,
    delete,
    func,
    insert,
    inspect,
    select,
    text,
)
from sqlalchemy.exc import DBAPIError

from infrastructure.observability import ConnectionProbe, DefaultConnectionProbe
from tenancy.domain.value_objects import MigrationRecord
from tenancy.infrastructure.migration_scripts import MigrationScript, discover_scripts
from tenancy.infrastructure.native_errors import (
    connection_error,
    is_connection_failure,
    native_message,
    schema_error,
    sqlstate,
)
from tenancy.infrastructure.observability import (
    DefaultMigrationProbe,
    MigrationProbe,
)
from tenancy.ports.exceptions import (
    MigrationFailedError,
    MigrationScriptError,
    NamespaceOperationError,
)
from tenancy.ports.repositories import IMigrationRunner

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class MigrationRunner(IMigrationRunner):
    """Runs tenant migration scripts against a single schema per call.

    Holds no state between calls besides its configuration; the applied
    versions are always read back from the schema's tracking table.
    """

    def __init__(
        self,
        engine: Engine,
        migrations_path: Path,
        table_name: str = "schema_migrations",
        probe: MigrationProbe | None = None,
        connection_probe: ConnectionProbe | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            engine: Engine whose pool provides connections
            migrations_path: Directory of tenant migration scripts
            table_name: Tracking table created inside each tenant schema
            probe: Optional domain probe for observability
            connection_probe: Optional probe for transport failures
        """
        self._engine = engine
        self._path = migrations_path
        self._table_name = table_name
        self._probe = probe or DefaultMigrationProbe()
        self._connection_probe = connection_probe or DefaultConnectionProbe()

    @property
    def migrations_path(self) -> Path:
        """Directory holding the tenant migration scripts."""
        return self._path

    def migrate(self, tenant: str) -> list[int]:
        """Apply every pending script to the tenant schema.

        Returns:
            Versions applied by this run, ascending; empty if none was pending

        Raises:
            NamespaceNotFoundError: If the schema does not exist
            MigrationFailedError: If a script fails; carries the native text
        """
        scripts = discover_scripts(self._path)
        self._ensure_tracking_table(tenant)
        applied = {record.version for record in self.history(tenant)}

        done: list[int] = []
        for script in scripts:
            if script.version in applied:
                continue
            self._run_step(tenant, script, "upgrade", done)
            done.append(script.version)
            self._probe.migration_applied(tenant, script.version, script.name)

        self._probe.run_completed(tenant, done)
        return done

    def rollback(self, tenant: str, steps: int = 1) -> list[int]:
        """Revert the ``steps`` most recently applied scripts.

        Returns:
            Versions reverted, newest first

        Raises:
            ValueError: If steps is less than 1
            MigrationScriptError: If an applied version has no script on disk
                or its script has no downgrade()
            MigrationFailedError: If a downgrade fails
        """
        if steps < 1:
            raise ValueError("steps must be at least 1")

        scripts = {script.version: script for script in discover_scripts(self._path)}
        latest = [record.version for record in reversed(self.history(tenant))][:steps]

        done: list[int] = []
        for version in latest:
            script = scripts.get(version)
            if script is None:
                raise MigrationScriptError(
                    f"Migration {version} is applied to {tenant!r} but its "
                    f"script is missing from {self._path}"
                )
            self._run_step(tenant, script, "downgrade", done)
            done.append(version)
            self._probe.migration_reverted(tenant, version, script.name)

        self._probe.run_completed(tenant, done)
        return done

    def history(self, tenant: str) -> list[MigrationRecord]:
        """Return the tracking rows of the schema, oldest version first.

        Read-only: a schema no migration has run in yet has no tracking
        table and an empty history.

        Raises:
            NamespaceNotFoundError: If the schema does not exist
        """
        table = self._tracking_table(tenant)
        with self._translate_errors("history"):
            with self._engine.connect() as conn:
                conn.execute(
                    text("SELECT CAST(quote_ident(:tenant) AS regnamespace)"),
                    {"tenant": tenant},
                )
                if not inspect(conn).has_table(self._table_name, schema=tenant):
                    return []
                rows = conn.execute(
                    select(table.c.version, table.c.inserted_at).order_by(table.c.version)
                ).all()
        return [MigrationRecord(version=row.version, inserted_at=row.inserted_at) for row in rows]

    def pending_versions(self, tenant: str) -> list[int]:
        """Return versions on disk not yet applied to the schema, ascending."""
        applied = {record.version for record in self.history(tenant)}
        return [
            script.version
            for script in discover_scripts(self._path)
            if script.version not in applied
        ]

    def _tracking_table(self, tenant: str) -> Table:
        return Table(
            self._table_name,
            MetaData(),
            Column("version", BigInteger, primary_key=True, autoincrement=False),
            Column("inserted_at", DateTime, nullable=False, server_default=func.now()),
            schema=tenant,
        )

    def _ensure_tracking_table(self, tenant: str) -> None:
        with self._translate_errors("migrate"):
            with self._engine.begin() as conn:
                self._tracking_table(tenant).create(conn, checkfirst=True)

    def _run_step(
        self,
        tenant: str,
        script: MigrationScript,
        direction: str,
        done: list[int],
    ) -> None:
        step = script.step(direction)
        table = self._tracking_table(tenant)

        try:
            with self._engine.begin() as conn:
                self._scope_to_tenant(conn, tenant)
                with Operations.context(MigrationContext.configure(connection=conn)):
                    step()
                if direction == "upgrade":
                    conn.execute(insert(table).values(version=script.version))
                else:
                    conn.execute(delete(table).where(table.c.version == script.version))
        except DBAPIError as e:
            if is_connection_failure(e):
                self._connection_probe.connection_failed(operation="migrate", error=e)
                raise connection_error(e) from e
            detail = native_message(e)
            self._probe.migration_failed(tenant, script.version, detail)
            raise MigrationFailedError(
                detail,
                version=script.version,
                applied=done,
                pgcode=sqlstate(e),
            ) from e
        except Exception as e:
            detail = str(e) or type(e).__name__
            self._probe.migration_failed(tenant, script.version, detail)
            raise MigrationFailedError(detail, version=script.version, applied=done) from e

    def _scope_to_tenant(self, conn: Connection, tenant: str) -> None:
        """Resolve unqualified names in this transaction to the tenant schema."""
        quote = self._engine.dialect.identifier_preparer.quote_identifier
        conn.execute(text(f"SET LOCAL search_path TO {quote(tenant)}"))

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except DBAPIError as e:
            if is_connection_failure(e):
                self._connection_probe.connection_failed(operation=operation, error=e)
                raise connection_error(e) from e
            raise schema_error(e, default=NamespaceOperationError) from e
