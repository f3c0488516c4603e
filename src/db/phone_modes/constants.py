"""
Phone mode constants and enums.

This module contains the enums and static values shared by the phone
mode store, seeder and API.
"""

from enum import Enum


class PhoneMode(str, Enum):
    """How calls to a phone number are handled."""

    CALL = "CALL"
    OTP = "OTP"


# Reported by lookups when no record matches
UNKNOWN_MODE = "UNKNOWN"

# Default mode for records created without one
DEFAULT_MODE = PhoneMode.CALL

# Lookup request fields holding the called number, highest priority first
LOOKUP_NUMBER_FIELDS = ("Called", "To")

DEFAULT_SEED_NUMBERS = [
    {"number": "+17753055823", "mode": PhoneMode.CALL},
    {"number": "+16693454835", "mode": PhoneMode.CALL},
    {"number": "+19188183039", "mode": PhoneMode.CALL},
    {"number": "+15088127382", "mode": PhoneMode.CALL},
    {"number": "+18722965039", "mode": PhoneMode.CALL},
    {"number": "+14172218933", "mode": PhoneMode.CALL},
    {"number": "+19191919191", "mode": PhoneMode.OTP},
]
