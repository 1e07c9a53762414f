"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        SUBSITES_DB_HOST: Database host (default: localhost)
        SUBSITES_DB_PORT: Database port (default: 5432)
        SUBSITES_DB_DATABASE: Database name (default: subsites)
        SUBSITES_DB_USERNAME: Database user (default: subsites)
        SUBSITES_DB_PASSWORD: Database password (required in production)
        SUBSITES_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        SUBSITES_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="SUBSITES_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="subsites", description="Database name")
    username: str = Field(default="subsites", description="Database username")
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


class SubsiteSettings(BaseSettings):
    """Settings for subsite-aware group access.

    Environment variables:
        SUBSITES_DISABLE_FILTER: Turn off group scoping globally (default: false)
        SUBSITES_EDIT_PERMISSION: Permission whose subsites grant group
            editing (default: CMS_ACCESS_SecurityAdmin)
        SUBSITES_MAIN_SITE_SHOWS_ALL_GROUPS: On the main site, list every
            group instead of only global ones (default: true)
        SUBSITES_RUN_LEGACY_MIGRATION_ON_STARTUP: Migrate the legacy
            single-subsite column at startup (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="SUBSITES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    disable_filter: bool = Field(
        default=False,
        description="Disable subsite scoping of group queries",
    )
    edit_permission: str = Field(
        default="CMS_ACCESS_SecurityAdmin",
        description="Permission checked per subsite when editing groups",
        min_length=1,
    )
    main_site_shows_all_groups: bool = Field(
        default=True,
        description="Leave group queries unscoped on the main site (subsite 0)",
    )
    run_legacy_migration_on_startup: bool = Field(
        default=True,
        description="Run the legacy group subsite migration during startup",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Subsites API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def subsites(self) -> SubsiteSettings:
        """Get subsite access settings."""
        return get_subsite_settings()


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
def get_subsite_settings() -> SubsiteSettings:
    """Get cached subsite access settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return SubsiteSettings()
