"""
Dependencies for phone mode endpoints.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.database import get_db
from src.db.phone_modes.repository import PhoneModeRepository
from src.db.phone_modes.service import PhoneModeService


def get_phone_mode_repository(
    session: AsyncSession = Depends(get_db),
) -> PhoneModeRepository:
    """Get phone mode repository bound to the request session."""
    return PhoneModeRepository(session)


async def get_phone_mode_service(
    repository: PhoneModeRepository = Depends(get_phone_mode_repository),
) -> PhoneModeService:
    """Get phone mode service instance."""
    return PhoneModeService(repository)
