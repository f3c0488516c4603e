"""
Seeding of the baseline phone mode records.

Every configured pair is upserted on its own, so a bad pair is logged and
skipped without affecting the others. Re-running the seeder leaves the
table in the same state.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from src.db.database import Database
from src.db.phone_modes.config import SeedNumber, get_phone_mode_settings
from src.db.phone_modes.repository import PhoneModeRepository
from src.utils.logger import logger
from src.utils.phone import normalize_number


@dataclass
class SeedResult:
    """Outcome of a seeding run."""

    applied: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


async def seed_phone_modes(
    repository: PhoneModeRepository, seed_numbers: Sequence[SeedNumber]
) -> SeedResult:
    """
    Ensure each (number, mode) pair exists with the given mode.

    Pairs are applied in order and committed one at a time.

    Args:
        repository: Repository bound to the session to seed with
        seed_numbers: Pairs to enforce

    Returns:
        SeedResult: Numbers applied and numbers that failed
    """
    result = SeedResult()

    for seed in seed_numbers:
        number = normalize_number(seed.number)
        try:
            await repository.upsert_mode(number, seed.mode)
            await repository.session.commit()
            result.applied.append(number)
        except Exception as e:
            await repository.session.rollback()
            logger.exception(
                "[SEEDER] Failed to seed number",
                number=number,
                mode=seed.mode.value,
                error=str(e),
            )
            result.failed.append(number)

    logger.info(
        f"[SEEDER] Numbers initialized: {len(result.applied)} applied, "
        f"{len(result.failed)} failed"
    )
    return result


async def seed_on_connect(database: Database) -> None:
    """Database on_connect hook running the configured seed list."""
    settings = get_phone_mode_settings()
    if not settings.seed_on_connect:
        logger.info("[SEEDER] Seeding on connect disabled")
        return

    async with database.session() as session:
        await seed_phone_modes(PhoneModeRepository(session), settings.seed_numbers)
