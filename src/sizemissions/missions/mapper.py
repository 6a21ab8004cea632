"""Build API views from mission rows, their state and the current time."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from sizemissions.db.models import Mission, MissionTranslation, UserMissionState
from sizemissions.missions.catalog import MissionDefinition
from sizemissions.missions.engine import determine_initial_status, effective_status, ensure_utc
from sizemissions.missions.schemas import (
    MissionTranslationView,
    MissionUserStateView,
    MissionView,
    SeasonWindow,
)
from sizemissions.missions.state_store import snapshot


def pick_translation(translations: Iterable[MissionTranslation], locale: str) -> MissionTranslation | None:
    """Requested locale, else the first available one."""
    items = sorted(translations, key=lambda t: t.id)
    for item in items:
        if item.locale == locale:
            return item
    return items[0] if items else None


def to_mission_view(
    mission: Mission,
    definition: MissionDefinition,
    state: UserMissionState | None,
    locale: str,
    now: datetime,
) -> MissionView:
    translation = pick_translation(mission.translations, locale)

    if state is None:
        status = determine_initial_status(definition, now)
        user_state = None
    else:
        status = effective_status(definition, snapshot(state), now)
        user_state = MissionUserStateView(
            status=status,
            progress=state.progress or {},
            streak_counter=state.streak_counter,
            attempts=state.attempts,
            started_at=ensure_utc(state.started_at),
            completed_at=ensure_utc(state.completed_at),
            # Hide an elapsed cooldown deadline once the mission is eligible again
            next_eligible_at=ensure_utc(state.next_eligible_at) if status == "cooldown" else None,
            last_event_at=ensure_utc(state.last_event_at),
        )

    season = None
    if mission.season_start_month and mission.season_end_month:
        season = SeasonWindow(start_month=mission.season_start_month, end_month=mission.season_end_month)

    return MissionView(
        id=mission.id,
        code=mission.code,
        status=status,
        category=mission.category,
        difficulty=mission.difficulty,
        repeatable=mission.repeatable,
        cooldown_days=mission.cooldown_days,
        season=season,
        rules=mission.rules or {},
        rewards=mission.rewards or {},
        metadata=mission.mission_metadata or {},
        translation=MissionTranslationView(
            locale=translation.locale,
            title=translation.title,
            summary=translation.summary,
            reward_short=translation.reward_short,
            cta_label=translation.cta_label,
        ) if translation else None,
        user_state=user_state,
    )
