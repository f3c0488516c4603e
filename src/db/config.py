"""
Configuration management for database connections.

This module handles database configuration using Pydantic settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

from src.utils.logger import logger

ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
}


class DatabaseSettings(BaseSettings):
    """Database configuration using Pydantic settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="DB_"
    )

    url: str = Field(description="Database connection string")

    # Connection pool settings
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    pool_timeout: float = Field(
        default=30, description="Seconds to wait for a pooled connection"
    )

    # Driver timeouts
    connect_timeout: float = Field(
        default=5, description="Seconds allowed to establish a connection"
    )
    command_timeout: float = Field(
        default=45, description="Seconds allowed for a single statement"
    )
    echo: bool = Field(default=False, description="Echo SQL statements to logs")

    def get_async_url(self) -> str:
        """
        Get the asynchronous database URL.

        Plain postgres URLs are switched to the asyncpg driver; URLs that
        already name a driver are returned unchanged.

        Returns:
            str: Database connection URL for async operations
        """
        url = make_url(self.url)
        driver = ASYNC_DRIVERS.get(url.drivername)
        if driver:
            url = url.set(drivername=driver)
        return url.render_as_string(hide_password=False)

    def get_connect_args(self) -> dict:
        """
        Driver-level connection arguments.

        Returns:
            dict: asyncpg timeouts, or nothing for other drivers
        """
        if make_url(self.get_async_url()).drivername != "postgresql+asyncpg":
            return {}
        return {
            "timeout": self.connect_timeout,
            "command_timeout": self.command_timeout,
        }


# Global settings instance
_db_settings: DatabaseSettings | None = None


def get_db_settings() -> DatabaseSettings:
    """
    Get the global database settings instance.

    Returns:
        DatabaseSettings: The global settings instance
    """
    global _db_settings
    if _db_settings is None:
        _db_settings = DatabaseSettings()
        url = make_url(_db_settings.url)
        logger.info(
            f"DatabaseSettings loaded. Host: {url.host}, "
            f"Port: {url.port}, Database: {url.database}"
        )
    return _db_settings


def set_db_settings(settings: DatabaseSettings) -> None:
    """
    Set the global database settings instance.

    Useful for testing.

    Args:
        settings: The settings to set
    """
    global _db_settings
    _db_settings = settings
