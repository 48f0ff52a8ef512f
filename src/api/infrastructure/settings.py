"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from enum import StrEnum
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Landlord database connection settings.

    The same server credentials are reused for tenant databases; only the
    database name changes per company.

    Environment variables:
        SALESDESK_DB_HOST: Database host (default: localhost)
        SALESDESK_DB_PORT: Database port (default: 5432)
        SALESDESK_DB_DATABASE: Landlord database name (default: salesdesk)
        SALESDESK_DB_USERNAME: Database user (default: salesdesk)
        SALESDESK_DB_PASSWORD: Database password (required in production)
        SALESDESK_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        SALESDESK_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="SALESDESK_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="salesdesk", description="Landlord database name")
    username: str = Field(default="salesdesk", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

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


class ResolutionStrategy(StrEnum):
    """How the tenant identifier is extracted from a request."""

    PATH = "path"
    HOST = "host"


class TenancySettings(BaseSettings):
    """Tenant resolution and provisioning settings.

    Environment variables:
        SALESDESK_TENANCY_RESOLUTION_STRATEGY: path or host (default: path)
        SALESDESK_TENANCY_ROOT_DOMAIN: Landlord domain (default: localhost)
        SALESDESK_TENANCY_RESERVED_PATH_PREFIXES: JSON list of landlord path prefixes
        SALESDESK_TENANCY_DATABASE_PREFIX: Prefix for tenant database names (default: tenant_)
        SALESDESK_TENANCY_TRIAL_DAYS: Trial length for new companies (default: 14)
        SALESDESK_TENANCY_GRACE_DAYS: Days of access after trial end (default: 3)
        SALESDESK_TENANCY_VERIFY_CONNECTION_ON_ACTIVATE: Probe tenant DB per request (default: true)
        SALESDESK_TENANCY_MAX_SLUG_SUFFIX_ATTEMPTS: Numbered suffixes tried (default: 1000)
        SALESDESK_TENANCY_TENANT_POOL_SIZE: Pool size per tenant engine (default: 5)
    """

    model_config = SettingsConfigDict(
        env_prefix="SALESDESK_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    resolution_strategy: ResolutionStrategy = Field(
        default=ResolutionStrategy.PATH,
        description="Tenant identifier extraction strategy",
    )
    root_domain: str = Field(
        default="localhost",
        description="Domain serving landlord routes",
    )
    reserved_path_prefixes: list[str] = Field(
        default_factory=lambda: [
            "api",
            "auth",
            "registration",
            "health",
            "docs",
            "redoc",
            "openapi.json",
        ],
        description="First path segments that never name a tenant",
    )
    database_prefix: str = Field(
        default="tenant_",
        description="Prefix for tenant database names",
        min_length=1,
        max_length=20,
    )
    trial_days: int = Field(default=14, ge=0, le=365)
    grace_days: int = Field(default=3, ge=0, le=90)
    verify_connection_on_activate: bool = Field(
        default=True,
        description="Run a connectivity probe after activating a tenant database",
    )
    max_slug_suffix_attempts: int = Field(default=1000, ge=1)
    tenant_pool_size: int = Field(default=5, ge=1, le=100)

    @field_validator("root_domain")
    @classmethod
    def normalize_root_domain(cls, value: str) -> str:
        """Lowercase and drop any port from the root domain."""
        return value.strip().lower().split(":", 1)[0]

    @field_validator("reserved_path_prefixes")
    @classmethod
    def normalize_prefixes(cls, value: list[str]) -> list[str]:
        """Lowercase prefixes and strip surrounding slashes."""
        return [prefix.strip("/").lower() for prefix in value if prefix.strip("/")]


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="SalesDesk API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings."""
    return TenancySettings()
