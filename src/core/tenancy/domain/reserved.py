"""Reserved tenant names.

A reserved name denotes a system or shared schema. The tenant manager never
creates, drops, renames or migrates such a schema, and never reports one as
an existing tenant.
"""

from __future__ import annotations

import re
from typing import Iterable, Pattern, Union

ReservedRule = Union[str, Pattern[str]]

# Always reserved, whatever the configuration says
BUILTIN_RESERVED_NAMES: tuple[str, ...] = ("public", "information_schema")
BUILTIN_RESERVED_PATTERNS: tuple[Pattern[str], ...] = (re.compile(r"^pg_"),)


class ReservedNameValidator:
    """Predicate telling whether a name may be managed as a tenant.

    Combines the built-in rules (``public``, ``information_schema``, the
    ``pg_`` prefix) with configured literal names and regular expressions.
    Pure: no I/O and no state beyond the rules given at construction.
    """

    def __init__(
        self,
        names: Iterable[str] = (),
        patterns: Iterable[str | Pattern[str]] = (),
    ):
        self._names = frozenset(BUILTIN_RESERVED_NAMES) | frozenset(names)
        self._patterns = BUILTIN_RESERVED_PATTERNS + tuple(
            re.compile(p) if isinstance(p, str) else p for p in patterns
        )

    def is_reserved(self, name: str | None) -> bool:
        """Return True if ``name`` must never be treated as a tenant.

        None and the empty string are reserved.
        """
        if not name:
            return True
        if name in self._names:
            return True
        return any(pattern.search(name) for pattern in self._patterns)

    def rules(self) -> list[ReservedRule]:
        """Return every rule: literal names (sorted) followed by patterns."""
        return [*sorted(self._names), *self._patterns]
