"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance.
Use docker-compose for testing.
"""

from collections.abc import Generator
import os
from pathlib import Path

import pytest
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.schema import DropSchema

from infrastructure.database.engines import create_tenancy_engine
from infrastructure.settings import DatabaseSettings, TenancySettings
from tenancy.application import TenantManager
from tenancy.dependencies import get_tenant_manager

PRIV_PATH = Path(__file__).parent / "priv"

# Every schema a test may create; dropped before and after each test.
TEST_TENANTS = ("lala", "lili", "lolo", "lulu", "trilegal", "tenant_a", "tenant_b")


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        TENANCY_DB_HOST, TENANCY_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("TENANCY_DB_HOST", "localhost"),
        port=int(os.getenv("TENANCY_DB_PORT", "5432")),
        database=os.getenv("TENANCY_DB_DATABASE", "tenancy_test"),
        username=os.getenv("TENANCY_DB_USERNAME", "postgres"),
        password=SecretStr(os.getenv("TENANCY_DB_PASSWORD", "postgres")),
    )


@pytest.fixture(scope="session")
def tenancy_settings() -> TenancySettings:
    """Tenancy settings pointing at the test migration tree."""
    return TenancySettings(priv_path=PRIV_PATH, reserved_tenants=["www"])


@pytest.fixture(scope="session")
def engine(integration_db_settings: DatabaseSettings) -> Generator[Engine, None, None]:
    """Provide an engine against the test database."""
    engine = create_tenancy_engine(integration_db_settings)
    yield engine
    engine.dispose()


def _drop_test_tenants(engine: Engine) -> None:
    with engine.begin() as conn:
        for tenant in TEST_TENANTS:
            conn.execute(DropSchema(tenant, cascade=True, if_exists=True))


@pytest.fixture
def manager(
    engine: Engine, tenancy_settings: TenancySettings
) -> Generator[TenantManager, None, None]:
    """Provide a tenant manager with no test tenants present.

    Test schemas are dropped around each test.
    """
    _drop_test_tenants(engine)
    yield get_tenant_manager(engine=engine, settings=tenancy_settings)
    _drop_test_tenants(engine)


@pytest.fixture
def count_notes(engine: Engine):
    """Count the rows of ``<tenant>.notes`` outside the code under test."""

    def count(tenant: str) -> int:
        quote = engine.dialect.identifier_preparer.quote_identifier
        with engine.connect() as conn:
            return conn.execute(text(f"SELECT count(*) FROM {quote(tenant)}.notes")).scalar_one()

    return count
