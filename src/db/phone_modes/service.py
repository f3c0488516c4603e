"""
Service layer for phone mode management.

Implements lookup, CRUD, stats and bulk import on top of
PhoneModeRepository. Each mutating method commits its own unit of work.
"""

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from src.db.phone_modes.constants import DEFAULT_MODE, UNKNOWN_MODE, PhoneMode
from src.db.phone_modes.exceptions import (
    InvalidModeError,
    PhoneModeConflictError,
    PhoneModeValidationError,
)
from src.db.phone_modes.model import PhoneModeRecord
from src.db.phone_modes.repository import PhoneModeRepository, coerce_mode
from src.db.phone_modes.schemas import (
    BulkAddResults,
    FailedNumber,
    LookupResponse,
    PhoneModeResponse,
    SkippedNumber,
    StatsResponse,
)
from src.utils.logger import logger
from src.utils.phone import normalize_number


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


class PhoneModeService:
    """Service for looking up and managing phone number modes."""

    def __init__(self, repository: PhoneModeRepository):
        self.repository = repository
        self.session = repository.session

    async def lookup(
        self,
        called_number: str,
        from_number: Any = None,
        call_sid: Any = None,
    ) -> LookupResponse:
        """
        Resolve the mode for a called number.

        Args:
            called_number: Number already picked from the request candidates
            from_number: Caller, echoed back unchanged
            call_sid: Call SID, echoed back unchanged

        Returns:
            LookupResponse: Mode of the number, or UNKNOWN if not stored
        """
        number = normalize_number(called_number)
        record = await self.repository.find_by_number(number) if number else None

        mode = record.mode if record else UNKNOWN_MODE
        logger.info(
            "[PHONE_MODES] Lookup",
            called_number=number,
            mode=mode,
            call_sid=call_sid,
        )
        return LookupResponse(
            called_number=number,
            mode=mode,
            from_number=from_number,
            call_sid=call_sid,
        )

    async def list_numbers(self) -> list[PhoneModeRecord]:
        """List every record, newest first."""
        return await self.repository.list_all()

    async def add_number(self, number: Any, mode: Any) -> PhoneModeRecord:
        """
        Add a new number.

        Raises:
            PhoneModeValidationError: If a field is missing or the number is blank
            InvalidModeError: If mode is not CALL or OTP
            PhoneModeConflictError: If the number already exists
        """
        if _is_missing(number) or _is_missing(mode):
            raise PhoneModeValidationError("Number and mode are required")

        phone_mode = coerce_mode(mode)
        normalized = normalize_number(number)
        if not normalized:
            raise PhoneModeValidationError("Number must not be empty")

        record = await self.repository.insert(normalized, phone_mode)
        await self.session.commit()
        return record

    async def update_mode(self, record_id: Any, mode: Any) -> PhoneModeRecord:
        """
        Change the mode of a record.

        Raises:
            PhoneModeValidationError: If a field is missing
            InvalidModeError: If mode is not CALL or OTP
            PhoneModeNotFoundError: If the ID is unknown
        """
        if _is_missing(record_id) or _is_missing(mode):
            raise PhoneModeValidationError("ID and mode are required")

        phone_mode = coerce_mode(mode)
        record = await self.repository.update_mode(str(record_id), phone_mode)
        await self.session.commit()
        return record

    async def delete_number(self, record_id: str) -> PhoneModeRecord:
        """
        Delete a record.

        Raises:
            PhoneModeNotFoundError: If the ID is unknown
        """
        record = await self.repository.delete_by_id(record_id)
        await self.session.commit()
        return record

    async def get_stats(self) -> StatsResponse:
        """Count records in total and per mode."""
        return StatsResponse(
            total=await self.repository.count(),
            call=await self.repository.count(PhoneMode.CALL),
            otp=await self.repository.count(PhoneMode.OTP),
            timestamp=datetime.now(UTC),
        )

    async def bulk_add(self, items: Sequence[Any]) -> BulkAddResults:
        """
        Add many numbers, classifying each item independently.

        Blank numbers and invalid modes are reported as errors, existing
        numbers as skipped. A failing item never stops the rest.

        Args:
            items: Sequence of {number, mode} mappings

        Returns:
            BulkAddResults: Added records, skipped and failed items
        """
        results = BulkAddResults()

        for item in items:
            raw_number = item.get("number") if isinstance(item, Mapping) else None
            normalized = normalize_number(raw_number)
            if not normalized:
                results.errors.append(
                    FailedNumber(number=raw_number, error="Invalid number")
                )
                continue

            raw_mode = item.get("mode")
            try:
                phone_mode = DEFAULT_MODE if raw_mode is None else coerce_mode(raw_mode)
            except InvalidModeError:
                results.errors.append(
                    FailedNumber(number=raw_number, error="Invalid mode")
                )
                continue

            try:
                record = await self.repository.insert(normalized, phone_mode)
            except PhoneModeConflictError:
                results.skipped.append(SkippedNumber(number=normalized))
                continue
            except Exception as e:
                logger.exception(
                    "[PHONE_MODES] Bulk add item failed",
                    number=normalized,
                    error=str(e),
                )
                results.errors.append(
                    FailedNumber(number=raw_number, error="Failed to add number")
                )
                continue

            results.added.append(PhoneModeResponse.from_record(record))

        await self.session.commit()

        logger.info(
            f"[PHONE_MODES] Bulk add: {len(results.added)} added, "
            f"{len(results.skipped)} skipped, {len(results.errors)} errors"
        )
        return results
