"""Tenant manager: the public façade of the tenancy bounded context.

Composes the reserved-name rule, the namespace store and the migration
runner. Every mutating call checks the reserved-name rule before touching
the database. Tenancy failures come back as error results whose detail is
the native database text; transport failures (``DatabaseConnectionError``)
propagate as exceptions.
"""

from __future__ import annotations

from pathlib import Path

from tenancy.application.observability import (
    DefaultTenantManagerProbe,
    TenantManagerProbe,
)
from tenancy.application.results import OperationResult
from tenancy.domain.reserved import ReservedNameValidator
from tenancy.domain.value_objects import TenantName
from tenancy.ports.exceptions import (
    InvalidTenantNameError,
    ReservedNameError,
    TenancyError,
)
from tenancy.ports.repositories import IMigrationRunner, INamespaceStore


class TenantManager:
    """Create, drop, rename, list and migrate tenant schemas.

    State of a tenant as seen through this façade:

        Absent --create_schema--> Present/Unmigrated --migrate--> Present/Current
        Absent --create--> Present/Current
        Present --rename--> Present under the new name (history kept)
        Present --drop--> Absent

    No locking is added on top of PostgreSQL: two concurrent creates of the
    same name yield one success and one duplicate-schema error.
    """

    def __init__(
        self,
        store: INamespaceStore,
        runner: IMigrationRunner,
        validator: ReservedNameValidator,
        probe: TenantManagerProbe | None = None,
    ):
        """Initialize TenantManager with dependencies.

        Args:
            store: Schema DDL and catalog access
            runner: Tenant migration runner
            validator: Reserved-name predicate
            probe: Optional domain probe for observability
        """
        self._store = store
        self._runner = runner
        self._validator = validator
        self._probe = probe or DefaultTenantManagerProbe()

    def create(self, tenant: str) -> OperationResult[str]:
        """Create the tenant schema and bring it up to date.

        Migrations only run if the schema was created. A failed migration
        leaves the schema in place, unmigrated; ``migrate`` can be retried.

        Returns:
            ok with the tenant name, or the create/migrate error
        """
        created = self.create_schema(tenant)
        if not created.ok:
            return created

        migrated = self.migrate(tenant)
        if not migrated.ok:
            return OperationResult.failure(migrated.error)
        return OperationResult.success(tenant)

    def create_schema(self, tenant: str) -> OperationResult[str]:
        """Create the tenant schema without running migrations."""
        try:
            self._check_name(tenant, "create")
            self._store.create_schema(tenant)
        except TenancyError as e:
            return self._failed("create", tenant, e)

        self._probe.tenant_created(tenant)
        return OperationResult.success(tenant)

    def drop(self, tenant: str) -> OperationResult[str]:
        """Drop the tenant schema with all its tables.

        Dropping an absent tenant is an error (native "does not exist").
        """
        try:
            self._check_reserved(tenant, "drop")
            self._store.drop_schema(tenant)
        except TenancyError as e:
            return self._failed("drop", tenant, e)

        self._probe.tenant_dropped(tenant)
        return OperationResult.success(tenant)

    def rename(self, old: str, new: str) -> OperationResult[str]:
        """Rename a tenant. Migrations are not re-run; history moves along."""
        try:
            self._check_reserved(old, "rename")
            self._check_name(new, "rename")
            self._store.rename_schema(old, new)
        except TenancyError as e:
            return self._failed("rename", old, e)

        self._probe.tenant_renamed(old, new)
        return OperationResult.success(new)

    def all(self) -> list[str]:
        """Return every tenant, sorted by name."""
        return self._store.list_schemas()

    def exists(self, tenant: str) -> bool:
        """Return True if the tenant schema exists. Reserved names never do."""
        if self._validator.is_reserved(tenant):
            return False
        return self._store.schema_exists(tenant)

    def migrate(self, tenant: str) -> OperationResult[list[int]]:
        """Apply pending tenant migrations.

        Returns:
            ok with the versions applied (ascending, possibly empty), or the
            native text of the first failing statement
        """
        try:
            self._check_reserved(tenant, "migrate")
            versions = self._runner.migrate(tenant)
        except TenancyError as e:
            return self._failed("migrate", tenant, e)

        self._probe.tenant_migrated(tenant, versions)
        return OperationResult.success(versions)

    def rollback(self, tenant: str, steps: int = 1) -> OperationResult[list[int]]:
        """Revert the ``steps`` latest migrations of a tenant."""
        try:
            self._check_reserved(tenant, "rollback")
            versions = self._runner.rollback(tenant, steps=steps)
        except TenancyError as e:
            return self._failed("rollback", tenant, e)

        self._probe.tenant_rolled_back(tenant, versions)
        return OperationResult.success(versions)

    def migrate_all(self) -> dict[str, OperationResult[list[int]]]:
        """Migrate every tenant, continuing past individual failures."""
        return {tenant: self.migrate(tenant) for tenant in self.all()}

    def migrations_path(self) -> Path:
        """Directory holding the tenant migration scripts."""
        return self._runner.migrations_path

    def _check_reserved(self, tenant: str | None, operation: str) -> None:
        if self._validator.is_reserved(tenant):
            self._probe.reserved_name_rejected(operation, tenant)
            raise ReservedNameError(tenant)

    def _check_name(self, tenant: str, operation: str) -> None:
        self._check_reserved(tenant, operation)
        try:
            TenantName.from_string(tenant)
        except ValueError as e:
            raise InvalidTenantNameError(str(e)) from e

    def _failed(self, operation: str, tenant: str, error: TenancyError) -> OperationResult:
        self._probe.operation_failed(operation, tenant, error.detail)
        return OperationResult.failure(error)
