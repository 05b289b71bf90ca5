"""Unit tests for migration script discovery and loading."""

from pathlib import Path

import pytest

from infrastructure.settings import TenancySettings
from tenancy.infrastructure.migration_scripts import (
    MigrationScript,
    discover_scripts,
    migrations_path,
    shared_migrations_path,
)
from tenancy.ports.exceptions import MigrationScriptError

SCRIPT = """
calls = []

def upgrade():
    calls.append("up")

def downgrade():
    calls.append("down")
"""


def _write(directory: Path, name: str, body: str = SCRIPT) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(body)
    return path


class TestPaths:
    def test_tenant_migrations_live_under_priv(self):
        settings = TenancySettings(priv_path=Path("/srv/app/priv"))

        assert migrations_path(settings) == Path("/srv/app/priv/tenant_migrations")

    def test_shared_migrations_live_beside_them(self):
        settings = TenancySettings(priv_path=Path("/srv/app/priv"))

        assert shared_migrations_path(settings) == Path("/srv/app/priv/migrations")


class TestDiscoverScripts:
    """Tests for discover_scripts."""

    def test_missing_directory_has_no_scripts(self, tmp_path):
        assert discover_scripts(tmp_path / "nope") == []

    def test_orders_by_numeric_version(self, tmp_path):
        _write(tmp_path, "20160711125401_create_notes.py")
        _write(tmp_path, "9_early.py")
        _write(tmp_path, "100_middle.py")

        scripts = discover_scripts(tmp_path)

        assert [s.version for s in scripts] == [9, 100, 20160711125401]
        assert scripts[-1].name == "create_notes"

    def test_ignores_files_outside_the_convention(self, tmp_path):
        _write(tmp_path, "1_first.py")
        _write(tmp_path, "__init__.py")
        _write(tmp_path, "README.md")
        _write(tmp_path, "helpers.py")
        (tmp_path / "2_directory.py").mkdir()

        assert [s.version for s in discover_scripts(tmp_path)] == [1]

    def test_duplicate_versions_are_rejected(self, tmp_path):
        _write(tmp_path, "1_first.py")
        _write(tmp_path, "01_again.py")

        with pytest.raises(MigrationScriptError, match="Duplicate migration version 1"):
            discover_scripts(tmp_path)


class TestMigrationScript:
    """Tests for loading a script's steps."""

    def test_step_returns_the_function(self, tmp_path):
        path = _write(tmp_path, "1_first.py")
        script = MigrationScript(version=1, name="first", path=path)

        upgrade = script.step("upgrade")
        upgrade()

        assert upgrade.__globals__["calls"] == ["up"]

    def test_each_load_is_a_fresh_module(self, tmp_path):
        path = _write(tmp_path, "1_first.py")
        script = MigrationScript(version=1, name="first", path=path)

        assert script.load() is not script.load()

    def test_missing_downgrade_is_an_error(self, tmp_path):
        path = _write(tmp_path, "1_first.py", "def upgrade():\n    pass\n")
        script = MigrationScript(version=1, name="first", path=path)

        with pytest.raises(MigrationScriptError, match="does not define downgrade"):
            script.step("downgrade")
