"""
Repository for phone mode database operations.

Provides CRUD operations for PhoneModeRecord rows using SQLAlchemy async
sessions. Uniqueness of ``number`` is enforced by the database; this layer
turns constraint violations into PhoneModeConflictError.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.phone_modes.constants import PhoneMode
from src.db.phone_modes.exceptions import (
    InvalidModeError,
    PhoneModeConflictError,
    PhoneModeNotFoundError,
)
from src.db.phone_modes.model import PhoneModeRecord
from src.utils.logger import logger


def coerce_mode(value: Any) -> PhoneMode:
    """
    Convert a raw mode value to a PhoneMode.

    Matching is exact: "call" is not a valid mode.

    Raises:
        InvalidModeError: If the value is not CALL or OTP
    """
    if isinstance(value, PhoneMode):
        return value
    try:
        return PhoneMode(value)
    except (ValueError, TypeError):
        raise InvalidModeError(value)


class PhoneModeRepository:
    """Repository for managing phone mode records in the database."""

    def __init__(self, session: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_number(self, number: str) -> PhoneModeRecord | None:
        """
        Find the record for an exact (already normalized) number.

        Args:
            number: Normalized phone number

        Returns:
            PhoneModeRecord | None: The record, or None on a miss
        """
        result = await self.session.execute(
            select(PhoneModeRecord).where(PhoneModeRecord.number == number)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, record_id: str) -> PhoneModeRecord | None:
        """Get a record by its ID."""
        result = await self.session.execute(
            select(PhoneModeRecord).where(PhoneModeRecord.id == record_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[PhoneModeRecord]:
        """
        List every record, newest first.

        Returns:
            list[PhoneModeRecord]: Records ordered by creation time descending
        """
        result = await self.session.execute(
            select(PhoneModeRecord).order_by(desc(PhoneModeRecord.created_at))
        )
        records = list(result.scalars().all())

        logger.debug(f"[PhoneModeRepository] Retrieved {len(records)} records")
        return records

    async def insert(self, number: str, mode: PhoneMode | str) -> PhoneModeRecord:
        """
        Create a record for a new number.

        The insert runs in a SAVEPOINT so a duplicate does not roll back
        other work pending in the session.

        Args:
            number: Normalized phone number
            mode: Mode for the number

        Returns:
            PhoneModeRecord: The created record

        Raises:
            InvalidModeError: If mode is not CALL or OTP
            PhoneModeConflictError: If the number already has a record
        """
        phone_mode = coerce_mode(mode)

        if await self.find_by_number(number):
            raise PhoneModeConflictError(number)

        record = PhoneModeRecord(number=number, mode=phone_mode.value)
        try:
            async with self.session.begin_nested():
                self.session.add(record)
                await self.session.flush()
        except IntegrityError as e:
            # Lost a race against a concurrent insert of the same number
            logger.info(
                f"[PhoneModeRepository] Unique constraint rejected number {number}"
            )
            raise PhoneModeConflictError(number) from e

        logger.info(
            f"[PhoneModeRepository] Created record: id={record.id}, "
            f"number={number}, mode={phone_mode.value}"
        )
        return record

    async def update_mode(
        self, record_id: str, mode: PhoneMode | str
    ) -> PhoneModeRecord:
        """
        Change the mode of an existing record.

        Args:
            record_id: Record ID
            mode: New mode

        Returns:
            PhoneModeRecord: The updated record

        Raises:
            InvalidModeError: If mode is not CALL or OTP
            PhoneModeNotFoundError: If no record has that ID
        """
        phone_mode = coerce_mode(mode)

        record = await self.get_by_id(record_id)
        if not record:
            logger.warning(
                f"[PhoneModeRepository] Cannot update mode: record {record_id} not found"
            )
            raise PhoneModeNotFoundError(record_id)

        record.mode = phone_mode.value
        record.updated_at = datetime.now(UTC)
        await self.session.flush()

        logger.info(
            f"[PhoneModeRepository] Updated mode: id={record_id}, mode={phone_mode.value}"
        )
        return record

    async def delete_by_id(self, record_id: str) -> PhoneModeRecord:
        """
        Delete a record.

        Args:
            record_id: Record ID

        Returns:
            PhoneModeRecord: The removed record

        Raises:
            PhoneModeNotFoundError: If no record has that ID
        """
        record = await self.get_by_id(record_id)
        if not record:
            logger.debug(f"[PhoneModeRepository] Record {record_id} not found")
            raise PhoneModeNotFoundError(record_id)

        await self.session.delete(record)
        await self.session.flush()

        logger.info(
            f"[PhoneModeRepository] Deleted record: id={record_id}, number={record.number}"
        )
        return record

    async def upsert_mode(self, number: str, mode: PhoneMode | str) -> PhoneModeRecord:
        """
        Set the mode for a number, creating the record if needed.

        Existing records keep their id and created_at. Only the seeder uses
        this; API writes go through insert and update_mode.

        Args:
            number: Normalized phone number
            mode: Mode to enforce

        Returns:
            PhoneModeRecord: The created or updated record
        """
        phone_mode = coerce_mode(mode)

        record = await self.find_by_number(number)
        if record is None:
            try:
                return await self.insert(number, phone_mode)
            except PhoneModeConflictError:
                # Created concurrently; fall through and update it
                record = await self.find_by_number(number)
                if record is None:
                    raise

        if record.mode != phone_mode.value:
            record.mode = phone_mode.value
            record.updated_at = datetime.now(UTC)
            await self.session.flush()
            logger.info(
                f"[PhoneModeRepository] Upsert changed mode: number={number}, "
                f"mode={phone_mode.value}"
            )
        return record

    async def count(self, mode: PhoneMode | None = None) -> int:
        """
        Count records, optionally only those with a given mode.

        Args:
            mode: Mode to filter by, or None for all records

        Returns:
            int: Number of matching records
        """
        stmt = select(func.count()).select_from(PhoneModeRecord)
        if mode is not None:
            stmt = stmt.where(PhoneModeRecord.mode == coerce_mode(mode).value)
        result = await self.session.execute(stmt)
        return result.scalar_one()
