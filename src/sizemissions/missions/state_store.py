"""Per-profile mission state rows: lazy creation, snapshots, conditional updates."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from sizemissions.db.dialect import upsert_insert
from sizemissions.db.models import Mission, MissionProgressEvent, UserMissionState
from sizemissions.missions.catalog import MissionDefinition, build_definition, find_mission_definition
from sizemissions.missions.engine import (
    MissionDecision,
    MissionStateSnapshot,
    determine_initial_status,
    ensure_utc,
)
from sizemissions.missions.exceptions import MissionNotFoundError

logger = logging.getLogger(__name__)


async def list_missions(db: AsyncSession) -> list[Mission]:
    result = await db.execute(
        select(Mission)
        .order_by(Mission.display_order, Mission.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_mission_by_code(db: AsyncSession, code: str) -> Mission:
    """Load a mission row by code (case-insensitive). Raises MissionNotFoundError."""
    result = await db.execute(
        select(Mission)
        .where(Mission.code == code.upper())
        .execution_options(populate_existing=True)
    )
    mission = result.scalar_one_or_none()
    if mission is None:
        raise MissionNotFoundError(code.upper())
    return mission


def definition_for(mission: Mission) -> MissionDefinition:
    """Catalog definition for a stored mission.

    Rows seeded by an older catalog that no longer ships the code are
    rebuilt from the stored columns.
    """
    definition = find_mission_definition(mission.code)
    if definition is not None:
        return definition

    rules = mission.rules or {}
    rewards = mission.rewards or {}
    season = None
    if mission.season_start_month and mission.season_end_month:
        season = (mission.season_start_month, mission.season_end_month)
    return build_definition({
        "code": mission.code,
        "category": mission.category,
        "difficulty": mission.difficulty,
        "repeatable": mission.repeatable,
        "cooldown_days": mission.cooldown_days,
        "season": season,
        "triggers": rules.get("triggers", []),
        "criterion": rules.get("criterion", ""),
        "rewards": {
            "xp": rewards.get("xp", 0),
            "badges": rewards.get("badges", []),
            "unlocks": rewards.get("unlocks", []),
            "premium_days": rewards.get("premiumDays"),
            "freeze_tokens": rewards.get("freezeTokens"),
            "extras": rewards.get("extras", []),
        },
    }, display_order=mission.display_order)


def snapshot(state: UserMissionState) -> MissionStateSnapshot:
    return MissionStateSnapshot(
        status=state.status,
        progress=dict(state.progress or {}),
        streak_counter=state.streak_counter or 0,
        attempts=state.attempts or 0,
        started_at=ensure_utc(state.started_at),
        completed_at=ensure_utc(state.completed_at),
        next_eligible_at=ensure_utc(state.next_eligible_at),
        last_event_at=ensure_utc(state.last_event_at),
    )


async def ensure_states(
    db: AsyncSession,
    profile_id: str,
    missions: list[Mission],
    now: datetime,
) -> dict[int, UserMissionState]:
    """Return state rows keyed by mission id, creating missing ones.

    Missing rows are inserted with ON CONFLICT DO NOTHING so a concurrent
    request creating the same row is harmless.
    """
    mission_ids = [m.id for m in missions]
    if not mission_ids:
        return {}

    states = await _load_states(db, profile_id, mission_ids)
    missing = [m for m in missions if m.id not in states]
    if missing:
        stmt = upsert_insert(db, UserMissionState).values([
            {
                "profile_id": profile_id,
                "mission_id": m.id,
                "status": determine_initial_status(definition_for(m), now),
                "progress": {},
                "streak_counter": 0,
                "attempts": 0,
                "updated_at": now,
            }
            for m in missing
        ])
        stmt = stmt.on_conflict_do_nothing(index_elements=["profile_id", "mission_id"])
        await db.execute(stmt)
        logger.debug("Created %d mission state rows for profile %s", len(missing), profile_id)
        states = await _load_states(db, profile_id, mission_ids)
    return states


async def _load_states(db: AsyncSession, profile_id: str, mission_ids: list[int]) -> dict[int, UserMissionState]:
    result = await db.execute(
        select(UserMissionState)
        .where(
            UserMissionState.profile_id == profile_id,
            UserMissionState.mission_id.in_(mission_ids),
        )
        .execution_options(populate_existing=True)
    )
    return {s.mission_id: s for s in result.scalars()}


async def apply_decision(
    db: AsyncSession,
    state: UserMissionState,
    expected_status: str,
    decision: MissionDecision,
    now: datetime,
) -> bool:
    """Write a decision only if the row still has `expected_status`.

    Returns False when another request changed the row first.
    """
    result = await db.execute(
        update(UserMissionState)
        .where(
            UserMissionState.id == state.id,
            UserMissionState.status == expected_status,
        )
        .values(
            status=decision.next_status,
            progress=decision.progress,
            streak_counter=decision.streak_counter,
            attempts=decision.attempts,
            started_at=decision.started_at,
            completed_at=decision.completed_at,
            next_eligible_at=decision.next_eligible_at if decision.next_status == "cooldown" else None,
            last_event_at=now,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def reload_state(db: AsyncSession, state_id: int) -> UserMissionState:
    result = await db.execute(
        select(UserMissionState)
        .where(UserMissionState.id == state_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


def record_progress_event(
    db: AsyncSession,
    profile_id: str,
    mission_id: int,
    event_type: str,
    payload: dict[str, Any],
    now: datetime,
) -> None:
    """Append an audit row. Flushed with the surrounding transaction."""
    db.add(MissionProgressEvent(
        profile_id=profile_id,
        mission_id=mission_id,
        event_type=event_type,
        payload=payload,
        created_at=now,
    ))
