"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

# PostgreSQL truncates identifiers longer than NAMEDATALEN - 1 bytes
MAX_TENANT_NAME_BYTES = 63

_TENANT_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class TenantName:
    """Name of a tenant, used verbatim as its schema name.

    Only the syntax is checked here. Whether a name is reserved is a
    separate question answered by ``ReservedNameValidator``.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> TenantName:
        """Create TenantName from string value.

        Args:
            value: Candidate schema name

        Returns:
            TenantName instance

        Raises:
            ValueError: If value is empty, too long or not an identifier
        """
        if not isinstance(value, str) or not value:
            raise ValueError("Tenant name must be a non-empty string")
        if not _TENANT_NAME_RE.match(value):
            raise ValueError(
                f"Invalid tenant name {value!r}: use letters, digits and "
                "underscores, not starting with a digit"
            )
        if len(value.encode("utf-8")) > MAX_TENANT_NAME_BYTES:
            raise ValueError(
                f"Invalid tenant name {value!r}: longer than "
                f"{MAX_TENANT_NAME_BYTES} bytes"
            )
        return cls(value=value)


@dataclass(frozen=True)
class MigrationRecord:
    """A row of a tenant's migration tracking table."""

    version: int
    inserted_at: datetime
