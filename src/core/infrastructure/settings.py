"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        TENANCY_DB_HOST: Database host (default: localhost)
        TENANCY_DB_PORT: Database port (default: 5432)
        TENANCY_DB_DATABASE: Database name (default: tenancy)
        TENANCY_DB_USERNAME: Database user (default: tenancy)
        TENANCY_DB_PASSWORD: Database password (required in production)
        TENANCY_DB_POOL_MIN_CONNECTIONS: Connections kept open in the pool (default: 2)
        TENANCY_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        TENANCY_DB_POOL_ENABLED: Enable connection pooling (default: true)
        TENANCY_DB_ECHO: Log every SQL statement (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="tenancy", description="Database name")
    username: str = Field(default="tenancy", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Connections kept open in the pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    pool_enabled: bool = Field(
        default=True,
        description="Enable connection pooling",
    )
    echo: bool = Field(default=False, description="Log every SQL statement")

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenancySettings(BaseSettings):
    """Schema-per-tenant settings.

    Environment variables:
        TENANCY_PRIV_PATH: Root holding the migration trees (default: priv)
        TENANCY_MIGRATIONS_TABLE: Per-schema migration tracking table
            (default: schema_migrations)
        TENANCY_DEFAULT_SCHEMA: Shared application schema, never a tenant
            (default: public)
        TENANCY_RESERVED_TENANTS: JSON list of extra reserved names
        TENANCY_RESERVED_PATTERNS: JSON list of extra reserved regexes
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    priv_path: Path = Field(
        default=Path("priv"),
        description="Root directory holding the shared and tenant migration trees",
    )
    migrations_table: str = Field(
        default="schema_migrations",
        description="Name of the migration tracking table inside each schema",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
    )
    default_schema: str = Field(
        default="public",
        description="Shared application schema, excluded from tenant listings",
    )
    reserved_tenants: list[str] = Field(
        default_factory=list,
        description="Names that can never be used as tenants, besides the built-ins",
    )
    reserved_patterns: list[str] = Field(
        default_factory=list,
        description="Regular expressions matching names that can never be tenants",
    )


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return TenancySettings()
