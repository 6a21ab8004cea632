"""Daily activity streaks and freeze consumption on the profile progression."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from sizemissions.db.models import ProfileProgression
from sizemissions.missions.progression_service import get_or_create_progression

logger = logging.getLogger(__name__)


def next_streak_state(
    current_streak: int,
    last_active_date: date | None,
    freezes_owned: int,
    freezes_used: int,
    day: date,
) -> tuple[int, int]:
    """Return (current_streak, freezes_used) after activity on `day`.

    - same day: unchanged
    - next day: streak + 1
    - exactly one missed day with an unused freeze: freeze consumed, streak + 1
    - otherwise: streak restarts at 1
    """
    if last_active_date is None:
        return 1, freezes_used

    gap = (day - last_active_date).days
    if gap <= 0:
        return current_streak, freezes_used
    if gap == 1:
        return current_streak + 1, freezes_used
    if gap == 2 and freezes_owned > freezes_used:
        return current_streak + 1, freezes_used + 1
    return 1, freezes_used


async def record_activity(
    db: AsyncSession,
    profile_id: str,
    day: date | None = None,
) -> ProfileProgression:
    """Record that the profile was active on `day` (UTC). Does not commit."""
    if day is None:
        day = datetime.now(timezone.utc).date()

    progression = await get_or_create_progression(db, profile_id)
    streak, freezes_used = next_streak_state(
        progression.current_streak,
        progression.last_active_date,
        progression.freezes_owned,
        progression.freezes_used,
        day,
    )

    if freezes_used > progression.freezes_used:
        logger.info("Profile %s used a streak freeze (streak %d)", profile_id, streak)

    if progression.last_active_date is None or day > progression.last_active_date:
        progression.last_active_date = day
    progression.current_streak = streak
    progression.freezes_used = freezes_used
    progression.best_streak = max(progression.best_streak, streak)
    progression.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return progression
