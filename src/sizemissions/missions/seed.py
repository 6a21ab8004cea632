"""Mission catalog seeding: upsert definitions and translations into the database."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sizemissions.db.dialect import upsert_insert
from sizemissions.db.models import Mission, MissionTranslation
from sizemissions.missions.catalog import MISSION_CATALOG, MissionDefinition

logger = logging.getLogger(__name__)


def mission_row(definition: MissionDefinition) -> dict:
    return {
        "code": definition.code,
        "category": definition.category,
        "difficulty": definition.difficulty,
        "repeatable": definition.repeatable,
        "cooldown_days": definition.cooldown_days,
        "season_start_month": definition.season.start_month if definition.season else None,
        "season_end_month": definition.season.end_month if definition.season else None,
        "rules": definition.rules.as_dict(),
        "rewards": definition.rewards.snapshot(),
        "metadata": definition.metadata_dict(),
        "display_order": definition.display_order,
    }


async def seed_missions(db: AsyncSession) -> int:
    """Upsert every catalog mission and its translations. Returns number of missions seeded."""
    now = datetime.now(timezone.utc)
    seeded = 0
    for definition in MISSION_CATALOG:
        values = mission_row(definition)
        # Core table insert: the ORM attribute for "metadata" is mission_metadata
        stmt = upsert_insert(db, Mission.__table__).values(**values, updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=["code"],
            set_={
                "category": stmt.excluded.category,
                "difficulty": stmt.excluded.difficulty,
                "repeatable": stmt.excluded.repeatable,
                "cooldown_days": stmt.excluded.cooldown_days,
                "season_start_month": stmt.excluded.season_start_month,
                "season_end_month": stmt.excluded.season_end_month,
                "rules": stmt.excluded.rules,
                "rewards": stmt.excluded.rewards,
                "metadata": stmt.excluded["metadata"],
                "display_order": stmt.excluded.display_order,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await db.execute(stmt)
        seeded += 1

    # Translations need the mission ids assigned above
    mission_ids = dict((await db.execute(select(Mission.code, Mission.id))).all())
    for definition in MISSION_CATALOG:
        for locale, text in definition.translations.items():
            stmt = upsert_insert(db, MissionTranslation).values(
                mission_id=mission_ids[definition.code],
                locale=locale,
                title=text.title,
                summary=text.summary,
                reward_short=text.reward_short,
                cta_label=text.cta_label,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["mission_id", "locale"],
                set_={
                    "title": stmt.excluded.title,
                    "summary": stmt.excluded.summary,
                    "reward_short": stmt.excluded.reward_short,
                    "cta_label": stmt.excluded.cta_label,
                },
            )
            await db.execute(stmt)

    await db.commit()
    logger.info("Seeded %d missions", seeded)
    return seeded
