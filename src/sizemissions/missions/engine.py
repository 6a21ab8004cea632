"""Mission progression engine: per-profile mission state machine.

hidden/locked -> available -> in_progress -> claimable -> completed | cooldown | available

Everything here is pure: functions take a catalog definition, a state
snapshot and the current time, and return a `MissionDecision`. Services
apply decisions to storage inside one transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Union

from sizemissions.missions.catalog import MissionDefinition
from sizemissions.missions.exceptions import InvalidTransitionError

STATUSES: tuple[str, ...] = (
    "hidden",
    "locked",
    "available",
    "in_progress",
    "claimable",
    "completed",
    "cooldown",
)

# Statuses that events may advance.
EVENT_ACTIVE_STATUSES: frozenset[str] = frozenset({"available", "in_progress", "claimable"})

# Start on these is a no-op returning the current state.
START_NOOP_STATUSES: frozenset[str] = frozenset({"in_progress", "claimable", "completed"})


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class MissionStateSnapshot:
    status: str
    progress: dict[str, Any] = field(default_factory=dict)
    streak_counter: int = 0
    attempts: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None
    next_eligible_at: datetime | None = None
    last_event_at: datetime | None = None


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RewardAction:
    xp: int
    rewards: dict[str, Any]


@dataclass(frozen=True)
class FreezeGrantAction:
    value: int


@dataclass(frozen=True)
class StreakIncrementAction:
    value: int


@dataclass(frozen=True)
class NotifyAction:
    payload: dict[str, Any]


@dataclass(frozen=True)
class AuditAction:
    event_type: str
    payload: dict[str, Any]


MissionAction = Union[RewardAction, FreezeGrantAction, StreakIncrementAction, NotifyAction, AuditAction]


@dataclass(frozen=True)
class MissionDecision:
    next_status: str
    progress: dict[str, Any]
    actions: tuple[MissionAction, ...] = ()
    next_eligible_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    attempts: int = 0
    streak_counter: int = 0
    changed: bool = True

    def actions_of(self, kind: type) -> list[Any]:
        return [action for action in self.actions if isinstance(action, kind)]


# ---------------------------------------------------------------------------
# Status rules
# ---------------------------------------------------------------------------


def determine_initial_status(definition: MissionDefinition, now: datetime) -> str:
    """Seasonal missions are visible only inside their season window (UTC month)."""
    if definition.category == "seasonal" and definition.season is not None:
        month = now.astimezone(timezone.utc).month
        return "available" if definition.season.contains(month) else "hidden"
    return "available"


def effective_status(definition: MissionDefinition, state: MissionStateSnapshot, now: datetime) -> str:
    """Status presented to callers.

    Expiry is lazy: an elapsed cooldown and a season window opening or
    closing are resolved on read, nothing rewrites rows in the background.
    """
    status = state.status
    if status == "cooldown":
        eligible_at = ensure_utc(state.next_eligible_at)
        if eligible_at is not None and eligible_at <= now:
            return determine_initial_status(definition, now)
        return status
    if status in ("hidden", "available"):
        return determine_initial_status(definition, now)
    return status


def plan_start(definition: MissionDefinition, state: MissionStateSnapshot, now: datetime) -> MissionDecision:
    """Move an available mission to in_progress."""
    status = effective_status(definition, state, now)

    if status in START_NOOP_STATUSES:
        return _unchanged(state, status)

    if status != "available":
        raise InvalidTransitionError(f"Mission {definition.code} cannot be started while {status}")

    return MissionDecision(
        next_status="in_progress",
        progress=dict(state.progress),
        actions=(AuditAction("MISSION_STARTED", {"code": definition.code}),),
        next_eligible_at=None,
        started_at=now,
        completed_at=state.completed_at,
        attempts=state.attempts,
        streak_counter=state.streak_counter,
    )


def plan_claim(definition: MissionDefinition, state: MissionStateSnapshot, now: datetime) -> MissionDecision:
    """Claim a claimable mission: compute rewards once and pick the next status."""
    status = effective_status(definition, state, now)
    if status != "claimable":
        raise InvalidTransitionError(f"Mission {definition.code} is not claimable (status: {status})")

    xp = definition.rewards.xp or 0
    freeze_tokens = definition.rewards.freeze_tokens or 0

    next_eligible_at = None
    if not definition.repeatable:
        next_status = "completed"
    elif definition.cooldown_days > 0:
        next_status = "cooldown"
        next_eligible_at = now + timedelta(days=definition.cooldown_days)
    else:
        next_status = determine_initial_status(definition, now)

    actions: list[MissionAction] = [RewardAction(xp=xp, rewards=definition.rewards.snapshot())]
    if freeze_tokens > 0:
        actions.append(FreezeGrantAction(freeze_tokens))

    streak_counter = state.streak_counter
    if definition.category == "streak":
        actions.append(StreakIncrementAction(1))
        streak_counter += 1

    actions.append(NotifyAction({
        "type": "mission_claimed",
        "code": definition.code,
        "xp": xp,
        "freeze_tokens": freeze_tokens,
        "next_status": next_status,
    }))
    actions.append(AuditAction("MISSION_CLAIMED", {
        "code": definition.code,
        "xp": xp,
        "freezeTokens": freeze_tokens,
        "nextStatus": next_status,
    }))

    return MissionDecision(
        next_status=next_status,
        progress={},
        actions=tuple(actions),
        next_eligible_at=next_eligible_at,
        started_at=state.started_at,
        completed_at=now,
        attempts=state.attempts + 1,
        streak_counter=streak_counter,
    )


def plan_progress(
    definition: MissionDefinition,
    state: MissionStateSnapshot,
    progress: dict[str, Any],
    claimable: bool,
    now: datetime,
    event_type: str,
    log: dict[str, Any],
) -> MissionDecision:
    """Apply an evaluator result to an active mission. Every applied result is audited."""
    status = effective_status(definition, state, now)
    if status not in EVENT_ACTIVE_STATUSES:
        raise InvalidTransitionError(f"Mission {definition.code} cannot progress while {status}")

    next_status = "claimable" if claimable or status == "claimable" else "in_progress"
    started_at = state.started_at if state.started_at is not None else now
    return MissionDecision(
        next_status=next_status,
        progress=progress,
        actions=(AuditAction(event_type, log),),
        next_eligible_at=None,
        started_at=started_at,
        completed_at=state.completed_at,
        attempts=state.attempts,
        streak_counter=state.streak_counter,
    )


def _unchanged(state: MissionStateSnapshot, status: str) -> MissionDecision:
    return MissionDecision(
        next_status=status,
        progress=dict(state.progress),
        next_eligible_at=state.next_eligible_at if status == "cooldown" else None,
        started_at=state.started_at,
        completed_at=state.completed_at,
        attempts=state.attempts,
        streak_counter=state.streak_counter,
        changed=False,
    )

