"""Capability shared by everything that can be routed to a tenant schema."""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

_T = TypeVar("_T", bound="NamespaceQualifiable")


@runtime_checkable
class NamespaceQualifiable(Protocol):
    """A data-access construct that can carry a namespace qualifier.

    Records, mutations and queries all implement this, so stamping a tenant
    onto any of them goes through one method instead of type checks.
    """

    @property
    def namespace(self) -> str | None:
        """Schema the construct is routed to, or None for the default."""
        ...

    def with_namespace(self: _T, namespace: str) -> _T:
        """Return a copy routed to ``namespace``; never mutates self."""
        ...
