"""Custom exception classes for phone mode operations."""

from http import HTTPStatus
from typing import Any


class PhoneModeError(Exception):
    """Base exception for all phone mode errors."""

    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PhoneModeValidationError(PhoneModeError):
    """Raised when a request is missing fields or carries invalid values."""


class InvalidModeError(PhoneModeValidationError):
    """Raised when a mode is not one of the known phone modes."""

    def __init__(self, mode: Any, message: str = "Mode must be CALL or OTP") -> None:
        super().__init__(message)
        self.mode = mode


class PhoneModeConflictError(PhoneModeError):
    """Raised when a number already has a record."""

    def __init__(self, number: str, message: str = "Number already exists") -> None:
        super().__init__(message)
        self.number = number


class PhoneModeNotFoundError(PhoneModeError):
    """Raised when no record has the requested id."""

    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, record_id: str, message: str = "Number not found") -> None:
        super().__init__(message)
        self.record_id = record_id
