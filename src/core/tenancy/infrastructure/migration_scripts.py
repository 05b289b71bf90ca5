"""Discovery and loading of versioned migration scripts.

Two parallel trees live under the private data root:

    priv/migrations/          shared (default schema) migrations
    priv/tenant_migrations/   applied to every tenant schema

A script is ``<version>_<name>.py`` with an integer version prefix and
defines ``upgrade()`` (and optionally ``downgrade()``) written against
``alembic.op``, exactly like an alembic revision file.
"""

from __future__ import annotations

import importlib.util
import re
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Callable

from tenancy.ports.exceptions import MigrationScriptError

if TYPE_CHECKING:
    from infrastructure.settings import TenancySettings

TENANT_MIGRATIONS_DIR = "tenant_migrations"
SHARED_MIGRATIONS_DIR = "migrations"

_SCRIPT_RE = re.compile(r"^(?P<version>\d+)_(?P<name>\w+)\.py$")


def migrations_path(settings: TenancySettings) -> Path:
    """Directory holding the tenant migration scripts."""
    return settings.priv_path / TENANT_MIGRATIONS_DIR


def shared_migrations_path(settings: TenancySettings) -> Path:
    """Directory holding the default schema's migration scripts."""
    return settings.priv_path / SHARED_MIGRATIONS_DIR


@dataclass(frozen=True)
class MigrationScript:
    """One versioned script on disk."""

    version: int
    name: str
    path: Path

    def load(self) -> ModuleType:
        """Import the script as a fresh module object."""
        spec = importlib.util.spec_from_file_location(
            f"tenant_migration_{self.version}", self.path
        )
        if spec is None or spec.loader is None:
            raise MigrationScriptError(f"Cannot load migration script {self.path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def step(self, direction: str) -> Callable[[], None]:
        """Return the script's ``upgrade`` or ``downgrade`` function."""
        func = getattr(self.load(), direction, None)
        if not callable(func):
            raise MigrationScriptError(
                f"Migration {self.version}_{self.name} does not define {direction}()"
            )
        return func


def discover_scripts(path: Path) -> list[MigrationScript]:
    """List the scripts in ``path`` ordered by ascending version.

    A missing directory has no scripts. Files that do not follow the
    ``<version>_<name>.py`` convention are ignored.

    Raises:
        MigrationScriptError: If two scripts share a version
    """
    if not path.is_dir():
        return []

    scripts: dict[int, MigrationScript] = {}
    for file in path.iterdir():
        match = _SCRIPT_RE.match(file.name)
        if match is None or not file.is_file():
            continue
        version = int(match["version"])
        if version in scripts:
            raise MigrationScriptError(
                f"Duplicate migration version {version}: "
                f"{scripts[version].path.name} and {file.name}"
            )
        scripts[version] = MigrationScript(version=version, name=match["name"], path=file)

    return [scripts[version] for version in sorted(scripts)]
