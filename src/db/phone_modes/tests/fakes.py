"""In-memory stand-in for PhoneModeRepository used by service and route tests."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.phone_modes.constants import PhoneMode
from src.db.phone_modes.exceptions import (
    PhoneModeConflictError,
    PhoneModeNotFoundError,
)
from src.db.phone_modes.model import PhoneModeRecord
from src.db.phone_modes.repository import coerce_mode


class InMemoryPhoneModeRepository:
    """Dict-backed repository honoring the same contract as the SQL one."""

    def __init__(self):
        self.session = AsyncMock(spec=AsyncSession)
        self.records: dict[str, PhoneModeRecord] = {}
        self._clock = datetime(2025, 1, 15, 10, 0, 0, tzinfo=UTC)

    def _now(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def find_by_number(self, number):
        return next(
            (r for r in self.records.values() if r.number == number), None
        )

    async def get_by_id(self, record_id):
        return self.records.get(record_id)

    async def list_all(self):
        return sorted(
            self.records.values(), key=lambda r: r.created_at, reverse=True
        )

    async def insert(self, number, mode):
        phone_mode = coerce_mode(mode)
        if await self.find_by_number(number):
            raise PhoneModeConflictError(number)
        now = self._now()
        record = PhoneModeRecord(
            id=str(uuid4()),
            number=number,
            mode=phone_mode.value,
            created_at=now,
            updated_at=now,
        )
        self.records[record.id] = record
        return record

    async def update_mode(self, record_id, mode):
        phone_mode = coerce_mode(mode)
        record = self.records.get(record_id)
        if record is None:
            raise PhoneModeNotFoundError(record_id)
        record.mode = phone_mode.value
        record.updated_at = self._now()
        return record

    async def delete_by_id(self, record_id):
        record = self.records.pop(record_id, None)
        if record is None:
            raise PhoneModeNotFoundError(record_id)
        return record

    async def upsert_mode(self, number, mode):
        phone_mode = coerce_mode(mode)
        record = await self.find_by_number(number)
        if record is None:
            return await self.insert(number, phone_mode)
        record.mode = phone_mode.value
        record.updated_at = self._now()
        return record

    async def count(self, mode: PhoneMode | None = None):
        if mode is None:
            return len(self.records)
        return sum(1 for r in self.records.values() if r.mode == mode.value)
