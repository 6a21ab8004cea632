"""Mission service: list, start, claim and event-driven progress.

Each public operation is one transaction. Decisions come from the pure engine;
this module loads state, applies the decision with a conditional UPDATE and
commits, or rolls everything back.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sizemissions.db.models import Profile
from sizemissions.missions.engine import (
    EVENT_ACTIVE_STATUSES,
    AuditAction,
    FreezeGrantAction,
    RewardAction,
    effective_status,
    plan_claim,
    plan_progress,
    plan_start,
)
from sizemissions.missions.evaluators import EVALUATORS, EvaluationContext, run_evaluator
from sizemissions.missions.events import MissionEvent
from sizemissions.missions.exceptions import (
    InvalidTransitionError,
    ProfileNotFoundError,
    StorageFailureError,
)
from sizemissions.missions.mapper import to_mission_view
from sizemissions.missions.progression_service import (
    RewardOutcome,
    apply_reward,
    progression_snapshot,
    publish_reward,
)
from sizemissions.missions.schemas import MissionView
from sizemissions.missions.state_store import (
    apply_decision,
    definition_for,
    ensure_states,
    get_mission_by_code,
    list_missions,
    record_progress_event,
    reload_state,
    snapshot,
)
from sizemissions.missions.streak_service import record_activity

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[None]:
    """Commit on success; roll back on any failure.

    Mission errors propagate unchanged. Database errors become
    StorageFailureError, which callers may retry.
    """
    try:
        yield
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Mission storage failure, transaction rolled back")
        raise StorageFailureError("Mission storage failed; no changes were applied") from e
    except Exception:
        await db.rollback()
        raise


async def resolve_profile(db: AsyncSession, profile_id: str) -> Profile:
    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise ProfileNotFoundError(profile_id)
    return profile


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


async def list_mission_views(
    db: AsyncSession,
    profile_id: str,
    locale: str,
    now: datetime | None = None,
) -> list[MissionView]:
    """All missions merged with the profile's state. Creates missing state rows."""
    now = _now(now)
    async with unit_of_work(db):
        missions = await list_missions(db)
        states = await ensure_states(db, profile_id, missions, now)
    return [
        to_mission_view(m, definition_for(m), states.get(m.id), locale, now)
        for m in missions
    ]


async def get_mission_view(
    db: AsyncSession,
    profile_id: str,
    code: str,
    locale: str,
    now: datetime | None = None,
) -> MissionView:
    now = _now(now)
    async with unit_of_work(db):
        mission = await get_mission_by_code(db, code)
        states = await ensure_states(db, profile_id, [mission], now)
    return to_mission_view(mission, definition_for(mission), states[mission.id], locale, now)


# ---------------------------------------------------------------------------
# Start / claim
# ---------------------------------------------------------------------------


async def start_mission(
    db: AsyncSession,
    profile_id: str,
    code: str,
    locale: str,
    now: datetime | None = None,
) -> MissionView:
    """Start a mission. Idempotent for in_progress, claimable and completed missions."""
    now = _now(now)
    async with unit_of_work(db):
        mission = await get_mission_by_code(db, code)
        definition = definition_for(mission)
        state = (await ensure_states(db, profile_id, [mission], now))[mission.id]

        decision = plan_start(definition, snapshot(state), now)
        if decision.changed and not await apply_decision(db, state, state.status, decision, now):
            # Lost a race with another writer: re-plan against the fresh row
            state = await reload_state(db, state.id)
            decision = plan_start(definition, snapshot(state), now)
            if decision.changed and not await apply_decision(db, state, state.status, decision, now):
                raise InvalidTransitionError(f"Mission {mission.code} changed concurrently, retry")

        if decision.changed:
            for audit in decision.actions_of(AuditAction):
                record_progress_event(db, profile_id, mission.id, audit.event_type,
                                      {**audit.payload, "startedAt": now.isoformat()}, now)
            state = await reload_state(db, state.id)
            logger.info("Profile %s started mission %s", profile_id, mission.code)

    return to_mission_view(mission, definition, state, locale, now)


async def claim_mission(
    db: AsyncSession,
    redis: object,
    profile_id: str,
    code: str,
    locale: str,
    now: datetime | None = None,
) -> tuple[MissionView, RewardOutcome]:
    """Claim a claimable mission and grant its rewards atomically.

    1. Conditional UPDATE of the state row (status must still be claimable)
    2. Ledger entry + XP/freeze increment + level recompute
    3. Audit row
    4. Commit, then best-effort Redis broadcast
    """
    now = _now(now)
    async with unit_of_work(db):
        mission = await get_mission_by_code(db, code)
        definition = definition_for(mission)
        state = (await ensure_states(db, profile_id, [mission], now))[mission.id]

        decision = plan_claim(definition, snapshot(state), now)
        if not await apply_decision(db, state, state.status, decision, now):
            raise InvalidTransitionError("Mission is no longer claimable")

        reward = decision.actions_of(RewardAction)[0]
        freeze_tokens = sum(action.value for action in decision.actions_of(FreezeGrantAction))
        outcome = await apply_reward(
            db,
            profile_id=profile_id,
            mission_id=mission.id,
            xp=reward.xp,
            rewards=reward.rewards,
            freeze_tokens=freeze_tokens,
            now=now,
        )
        for audit in decision.actions_of(AuditAction):
            record_progress_event(db, profile_id, mission.id, audit.event_type, {
                **audit.payload,
                "nextEligibleAt": decision.next_eligible_at.isoformat() if decision.next_eligible_at else None,
            }, now)
        state = await reload_state(db, state.id)

    logger.info(
        "Profile %s claimed mission %s: +%d XP, +%d freeze (level %d)",
        profile_id, mission.code, outcome.xp_awarded, outcome.freeze_tokens_awarded, outcome.level,
    )
    await publish_reward(redis, profile_id, mission.code, outcome)
    return to_mission_view(mission, definition, state, locale, now), outcome


# ---------------------------------------------------------------------------
# Event ingestion
# ---------------------------------------------------------------------------


async def process_mission_event(
    db: AsyncSession,
    event: MissionEvent,
    now: datetime | None = None,
) -> int:
    """Advance every mission whose evaluator handles the event.

    Returns the number of missions whose state changed. All writes commit
    together; a storage failure leaves nothing behind.
    """
    now = _now(now)
    today = now.astimezone(timezone.utc).date()
    updated = 0
    async with unit_of_work(db):
        await resolve_profile(db, event.profile_id)

        progression = await record_activity(db, event.profile_id, today)
        progression_view = progression_snapshot(progression)

        missions = [
            m for m in await list_missions(db)
            if m.code in EVALUATORS and EVALUATORS[m.code].handles(event.type)
        ]
        states = await ensure_states(db, event.profile_id, missions, now)

        for mission in missions:
            definition = definition_for(mission)
            state = states[mission.id]
            current = snapshot(state)
            status = effective_status(definition, current, now)
            if status not in EVENT_ACTIVE_STATUSES:
                continue

            result = run_evaluator(mission.code, EvaluationContext(
                event=event,
                progress=dict(current.progress),
                status=status,
                activity_day=today,
                progression=progression_view,
            ))
            if result is None:
                continue

            decision = plan_progress(
                definition, current, result.progress, result.claimable, now, event.type, log=result.log,
            )
            if not await apply_decision(db, state, state.status, decision, now):
                logger.info(
                    "Mission %s changed concurrently for profile %s, event skipped",
                    mission.code, event.profile_id,
                )
                continue

            for audit in decision.actions_of(AuditAction):
                record_progress_event(db, event.profile_id, mission.id, audit.event_type, {
                    "progress": decision.progress,
                    "status": decision.next_status,
                    "logs": audit.payload,
                }, now)
            updated += 1

    logger.debug("Event %s for profile %s advanced %d missions", event.type, event.profile_id, updated)
    return updated
