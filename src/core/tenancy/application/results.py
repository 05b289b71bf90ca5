"""Status/detail results returned by the tenant manager."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from tenancy.ports.exceptions import TenancyError

T = TypeVar("T")

Status = Literal["ok", "error"]


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a tenant operation.

    Unpacks as ``(status, detail)``. On failure ``detail`` is the error
    text, verbatim from PostgreSQL when the database rejected the call, and
    ``error`` keeps the typed exception for callers that branch on it.

    Example:
        status, versions = manager.migrate("acme")
        if status == "error":
            print(versions)  # the native error message
    """

    status: Status
    detail: Any
    error: TenancyError | None = None

    @classmethod
    def success(cls, detail: T) -> OperationResult[T]:
        return cls(status="ok", detail=detail)

    @classmethod
    def failure(cls, error: TenancyError) -> OperationResult[T]:
        return cls(status="error", detail=error.detail, error=error)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def unwrap(self) -> T:
        """Return the detail of a success, or raise the error of a failure."""
        if self.error is not None:
            raise self.error
        return self.detail

    def __iter__(self) -> Iterator[Any]:
        return iter((self.status, self.detail))
