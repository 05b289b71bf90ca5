"""Exceptions for the tenancy bounded context.

Errors that originate in PostgreSQL keep the server's text unchanged in
``detail`` (``ERROR <sqlstate> (<condition>): <message>``) so operators and
callers can match on it. Nothing here paraphrases a database message.
"""

from __future__ import annotations

from typing import Sequence


class TenancyError(Exception):
    """Base exception for tenant operations.

    Attributes:
        detail: Human readable message; for database failures the native
            error text, verbatim.
        pgcode: SQLSTATE of the underlying database error, if any.
    """

    def __init__(self, detail: str, pgcode: str | None = None):
        super().__init__(detail)
        self.detail = detail
        self.pgcode = pgcode


class ReservedNameError(TenancyError):
    """Raised before any database call when a tenant name is reserved."""

    def __init__(self, tenant: str | None):
        super().__init__(f"{tenant!r} is reserved and cannot be used as a tenant")
        self.tenant = tenant


class InvalidTenantNameError(TenancyError):
    """Raised when a tenant name is not a usable schema identifier."""

    pass


class DuplicateNamespaceError(TenancyError):
    """Raised when creating (or renaming onto) a schema that already exists."""

    pass


class NamespaceNotFoundError(TenancyError):
    """Raised when the target schema of a drop, rename or migration is absent."""

    pass


class NamespaceOperationError(TenancyError):
    """Raised for any other database error during schema DDL."""

    pass


class MigrationFailedError(TenancyError):
    """Raised when a migration script fails against a tenant schema.

    The run stops at the failing script. Scripts applied earlier in the same
    run stay applied and are listed in ``applied``.

    Attributes:
        version: Version of the script that failed.
        applied: Versions applied by this run before the failure.
    """

    def __init__(
        self,
        detail: str,
        version: int,
        applied: Sequence[int] = (),
        pgcode: str | None = None,
    ):
        super().__init__(detail, pgcode=pgcode)
        self.version = version
        self.applied = list(applied)


class MigrationScriptError(TenancyError):
    """Raised when the migration directory or a script in it is unusable."""

    pass


class TenantRoutingError(TenancyError):
    """Raised when a record cannot be written to the schema it is stamped for."""

    pass
