"""
Configuration for phone mode seeding.

The seed list can be overridden with a JSON array in
PHONE_MODE_SEED_NUMBERS, e.g. '[{"number": "+15550001111", "mode": "OTP"}]'.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.db.phone_modes.constants import DEFAULT_SEED_NUMBERS, PhoneMode
from src.utils.logger import logger


class SeedNumber(BaseModel):
    """A (number, mode) pair the seeder guarantees."""

    number: str = Field(..., description="Phone number, stored as given after trimming")
    mode: PhoneMode = Field(..., description="Mode to enforce for the number")


class PhoneModeSettings(BaseSettings):
    """Phone mode configuration using Pydantic settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False, extra="ignore", env_prefix="PHONE_MODE_"
    )

    seed_numbers: list[SeedNumber] = Field(
        default_factory=lambda: [SeedNumber(**item) for item in DEFAULT_SEED_NUMBERS],
        description="Numbers and modes applied on every database connection",
    )
    seed_on_connect: bool = Field(
        default=True, description="Run the seeder when the database connects"
    )


_phone_mode_settings: PhoneModeSettings | None = None


def get_phone_mode_settings() -> PhoneModeSettings:
    """
    Get the global phone mode settings instance.

    Returns:
        PhoneModeSettings: The global settings instance
    """
    global _phone_mode_settings
    if _phone_mode_settings is None:
        _phone_mode_settings = PhoneModeSettings()
        logger.info(
            "PhoneModeSettings loaded",
            seed_count=len(_phone_mode_settings.seed_numbers),
            seed_on_connect=_phone_mode_settings.seed_on_connect,
        )
    return _phone_mode_settings


def set_phone_mode_settings(settings: PhoneModeSettings) -> None:
    """
    Set the global phone mode settings instance.

    Useful for testing.
    """
    global _phone_mode_settings
    _phone_mode_settings = settings
