"""Profile progression: XP, level and freeze tokens, backed by the reward ledger.

Invariant: SUM(mission_reward_ledger.xp) per profile == profile_progression.xp.
Every XP change goes through `apply_reward`, which appends the ledger entry and
increments the aggregate in the caller's transaction.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sizemissions.db.dialect import upsert_insert
from sizemissions.db.models import Mission, MissionRewardLedger, ProfileProgression
from sizemissions.missions.evaluators import ProgressionSnapshot
from sizemissions.missions.leveling import compute_level, level_for

logger = logging.getLogger(__name__)

REWARD_SOURCE_MISSION_CLAIM = "mission_claim"


@dataclass(frozen=True)
class RewardOutcome:
    xp: int
    level: int
    previous_level: int
    title: str
    freezes_owned: int
    xp_awarded: int
    freeze_tokens_awarded: int

    @property
    def leveled_up(self) -> bool:
        return self.level > self.previous_level


async def get_or_create_progression(db: AsyncSession, profile_id: str) -> ProfileProgression:
    """Get or create the denormalized progression row for a profile."""
    result = await db.execute(
        select(ProfileProgression)
        .where(ProfileProgression.profile_id == profile_id)
        .execution_options(populate_existing=True)
    )
    progression = result.scalar_one_or_none()
    if progression is not None:
        return progression

    stmt = upsert_insert(db, ProfileProgression).values(
        profile_id=profile_id,
        xp=0,
        level=1,
        updated_at=datetime.now(timezone.utc),
    )
    stmt = stmt.on_conflict_do_nothing(index_elements=["profile_id"])
    await db.execute(stmt)
    result = await db.execute(
        select(ProfileProgression)
        .where(ProfileProgression.profile_id == profile_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


def progression_snapshot(progression: ProfileProgression) -> ProgressionSnapshot:
    return ProgressionSnapshot(
        xp=progression.xp,
        level=progression.level,
        current_streak=progression.current_streak,
        best_streak=progression.best_streak,
        freezes_owned=progression.freezes_owned,
        freezes_used=progression.freezes_used,
    )


async def apply_reward(
    db: AsyncSession,
    profile_id: str,
    mission_id: int,
    xp: int,
    rewards: dict[str, Any],
    freeze_tokens: int,
    now: datetime,
    source: str = REWARD_SOURCE_MISSION_CLAIM,
) -> RewardOutcome:
    """Append a ledger entry and increment the profile aggregate.

    1. Insert into mission_reward_ledger
    2. xp / freezes_owned incremented in SQL
    3. Recompute level from the new total
    Does not commit.
    """
    await get_or_create_progression(db, profile_id)

    db.add(MissionRewardLedger(
        profile_id=profile_id,
        mission_id=mission_id,
        source=source,
        xp=xp,
        rewards=rewards,
        created_at=now,
    ))

    previous_level = (await db.execute(
        select(ProfileProgression.level).where(ProfileProgression.profile_id == profile_id)
    )).scalar_one()

    await db.execute(
        update(ProfileProgression)
        .where(ProfileProgression.profile_id == profile_id)
        .values(
            xp=ProfileProgression.xp + xp,
            freezes_owned=ProfileProgression.freezes_owned + freeze_tokens,
            last_reward_claim_at=now,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )

    row = (await db.execute(
        select(ProfileProgression.xp, ProfileProgression.freezes_owned)
        .where(ProfileProgression.profile_id == profile_id)
    )).one()
    new_xp, freezes_owned = row.xp, row.freezes_owned

    new_level = level_for(new_xp)
    if new_level != previous_level:
        await db.execute(
            update(ProfileProgression)
            .where(ProfileProgression.profile_id == profile_id)
            .values(level=new_level)
            .execution_options(synchronize_session=False)
        )

    await db.flush()

    return RewardOutcome(
        xp=new_xp,
        level=new_level,
        previous_level=previous_level,
        title=compute_level(new_xp)["title"],
        freezes_owned=freezes_owned,
        xp_awarded=xp,
        freeze_tokens_awarded=freeze_tokens,
    )


async def ledger_total(db: AsyncSession, profile_id: str) -> int:
    result = await db.execute(
        select(func.coalesce(func.sum(MissionRewardLedger.xp), 0))
        .where(MissionRewardLedger.profile_id == profile_id)
    )
    return int(result.scalar_one())


async def list_rewards(
    db: AsyncSession,
    profile_id: str,
    page: int,
    per_page: int,
) -> tuple[list[tuple[MissionRewardLedger, str]], int]:
    """Reward history, newest first. Returns ((entry, mission_code) rows, total)."""
    total = (await db.execute(
        select(func.count())
        .select_from(MissionRewardLedger)
        .where(MissionRewardLedger.profile_id == profile_id)
    )).scalar_one()

    result = await db.execute(
        select(MissionRewardLedger, Mission.code)
        .join(Mission, Mission.id == MissionRewardLedger.mission_id)
        .where(MissionRewardLedger.profile_id == profile_id)
        .order_by(MissionRewardLedger.created_at.desc(), MissionRewardLedger.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    return [(entry, code) for entry, code in result.all()], total


async def publish_reward(redis: object, profile_id: str, code: str, outcome: RewardOutcome) -> None:
    """Broadcast claim and level-up events. Best effort: failures are logged."""
    if redis is None:
        return
    try:
        await redis.publish(  # type: ignore[attr-defined]
            "pubsub:mission_claimed",
            json.dumps({
                "profile_id": profile_id,
                "code": code,
                "xp_awarded": outcome.xp_awarded,
                "freeze_tokens_awarded": outcome.freeze_tokens_awarded,
                "xp": outcome.xp,
                "level": outcome.level,
            }),
        )
        if outcome.leveled_up:
            await redis.publish(  # type: ignore[attr-defined]
                "pubsub:level_up",
                json.dumps({
                    "profile_id": profile_id,
                    "old_level": outcome.previous_level,
                    "new_level": outcome.level,
                    "title": outcome.title,
                }),
            )
    except Exception:
        logger.warning("Failed to publish mission reward broadcast", exc_info=True)
