"""Translation of PostgreSQL errors into tenancy exceptions.

The text PostgreSQL reports is part of what callers see, so it is rendered
in one fixed shape and never reworded:

    ERROR 42P06 (duplicate_schema): schema "acme" already exists
"""

from __future__ import annotations

from psycopg2 import errorcodes
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

from infrastructure.database.exceptions import DatabaseConnectionError
from tenancy.ports.exceptions import (
    DuplicateNamespaceError,
    NamespaceNotFoundError,
    TenancyError,
)

DUPLICATE_SCHEMA = errorcodes.DUPLICATE_SCHEMA
INVALID_SCHEMA_NAME = errorcodes.INVALID_SCHEMA_NAME


def sqlstate(error: BaseException) -> str | None:
    """Return the SQLSTATE of a driver error, unwrapping SQLAlchemy's wrapper."""
    orig = getattr(error, "orig", error)
    return getattr(orig, "pgcode", None)


def native_message(error: BaseException) -> str:
    """Render a driver error as ``ERROR <code> (<condition>): <message>``.

    Errors without a SQLSTATE (transport failures) fall back to the driver's
    own text.
    """
    orig = getattr(error, "orig", error)
    code = sqlstate(error)
    diag = getattr(orig, "diag", None)
    primary = getattr(diag, "message_primary", None)

    if not code or not primary:
        return str(orig).strip()

    try:
        condition = errorcodes.lookup(code).lower()
    except KeyError:
        return f"ERROR {code}: {primary}"
    return f"ERROR {code} ({condition}): {primary}"


def is_connection_failure(error: DBAPIError) -> bool:
    """Return True if the error is a transport/pool failure, not a SQL error."""
    if error.connection_invalidated:
        return True
    return sqlstate(error) is None and isinstance(
        error, (OperationalError, InterfaceError)
    )


def connection_error(error: DBAPIError) -> DatabaseConnectionError:
    """Wrap a transport failure, keeping the driver text."""
    return DatabaseConnectionError(native_message(error))


def schema_error(
    error: DBAPIError,
    default: type[TenancyError],
) -> TenancyError:
    """Map a schema DDL failure to its tenancy exception.

    Duplicate schemas and missing schemas get their own types; anything else
    becomes ``default``. The message is always the native text.
    """
    code = sqlstate(error)
    message = native_message(error)

    if code == DUPLICATE_SCHEMA:
        return DuplicateNamespaceError(message, pgcode=code)
    if code == INVALID_SCHEMA_NAME:
        return NamespaceNotFoundError(message, pgcode=code)
    return default(message, pgcode=code)
