from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_ORIGINS = (
    "https://kingof-gray.vercel.app,https://kingo-fbackend.vercel.app"
)


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "dev"
    STAGING = "staging"
    PRODUCTION = "prod"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current environment (dev, staging, or prod)",
    )
    service_name: str = Field(
        default="phone-manager-api", description="Service name reported by /"
    )
    allowed_origins: str = Field(
        default=DEFAULT_ALLOWED_ORIGINS,
        description="Comma-separated list of allowed CORS origins",
    )
    host: str = Field(default="0.0.0.0", description="Interface to listen on")
    port: int = Field(default=3000, description="Port to listen on")

    def get_allowed_origins(self) -> list[str]:
        """Split the configured origins, dropping blanks."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]


_app_settings: AppSettings | None = None


def get_app_settings() -> AppSettings:
    global _app_settings
    if _app_settings is None:
        _app_settings = AppSettings()
    return _app_settings


def set_app_settings(settings: AppSettings) -> None:
    """Replace the global app settings (used by tests)."""
    global _app_settings
    _app_settings = settings


def get_allowed_origins() -> list[str]:
    """Get the allowed CORS origins from settings."""
    settings = get_app_settings()
    return settings.get_allowed_origins()
