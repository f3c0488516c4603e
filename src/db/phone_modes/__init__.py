"""
Phone mode database models and services.

This module maps phone numbers to the mode (CALL or OTP) their calls are
handled with.
"""

from src.db.phone_modes.constants import UNKNOWN_MODE, PhoneMode
from src.db.phone_modes.model import PhoneModeRecord
from src.db.phone_modes.repository import PhoneModeRepository
from src.db.phone_modes.service import PhoneModeService

__all__ = [
    "PhoneMode",
    "PhoneModeRecord",
    "PhoneModeRepository",
    "PhoneModeService",
    "UNKNOWN_MODE",
]
