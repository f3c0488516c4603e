"""
Pydantic schemas for the phone mode API.

Request models accept loosely typed fields so that missing or malformed
values reach the service layer and are reported as 400s with the same
messages the API has always used. Response models serialize with the
camelCase keys clients expect.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.db.phone_modes.model import PhoneModeRecord


class AddNumberRequest(BaseModel):
    """Request model for adding a single number."""

    number: Any = Field(None, description="Phone number; trimmed before storage")
    mode: Any = Field(None, description="CALL or OTP")


class UpdateModeRequest(BaseModel):
    """Request model for changing the mode of a record."""

    id: Any = Field(None, description="Record ID")
    mode: Any = Field(None, description="CALL or OTP")


class BulkAddRequest(BaseModel):
    """Request model for adding many numbers at once."""

    numbers: Any = Field(
        None, description="List of {number, mode} objects; mode defaults to CALL"
    )


class PhoneModeResponse(BaseModel):
    """Response model for a single phone mode record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Record ID")
    number: str = Field(..., description="Phone number")
    mode: str = Field(..., description="CALL or OTP")
    created_at: datetime = Field(
        ..., alias="createdAt", description="Creation timestamp"
    )
    updated_at: datetime = Field(
        ..., alias="updatedAt", description="Last update timestamp"
    )

    @classmethod
    def from_record(cls, record: PhoneModeRecord) -> "PhoneModeResponse":
        """Build the response from a stored record."""
        return cls.model_validate(record.to_dict())


class PhoneModeEnvelope(BaseModel):
    """Response wrapper for single-record mutations."""

    success: bool = True
    data: PhoneModeResponse


class LookupResponse(BaseModel):
    """Response model for a number lookup."""

    model_config = ConfigDict(populate_by_name=True)

    called_number: str = Field(
        ..., alias="calledNumber", description="Normalized number"
    )
    mode: str = Field(..., description="CALL, OTP, or UNKNOWN when not found")
    from_number: Any = Field(
        None, alias="from", description="Caller, passed through"
    )
    call_sid: Any = Field(
        None, alias="callSid", description="Call SID, passed through"
    )


class StatsResponse(BaseModel):
    """Response model for record counts."""

    total: int = Field(..., description="Total number of records")
    call: int = Field(..., description="Records in CALL mode")
    otp: int = Field(..., description="Records in OTP mode")
    timestamp: datetime = Field(..., description="When the counts were taken")


class SkippedNumber(BaseModel):
    """A bulk item that was not added because the number exists."""

    number: str
    reason: str = "exists"


class FailedNumber(BaseModel):
    """A bulk item that could not be added."""

    number: Any = None
    error: str


class BulkAddResults(BaseModel):
    """Per-item outcome of a bulk add."""

    added: list[PhoneModeResponse] = Field(default_factory=list)
    skipped: list[SkippedNumber] = Field(default_factory=list)
    errors: list[FailedNumber] = Field(default_factory=list)


class BulkAddResponse(BaseModel):
    """Response model for a bulk add."""

    success: bool = True
    results: BulkAddResults

