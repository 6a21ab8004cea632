"""Per-mission event evaluators.

Each evaluator is a pure function of the event, the mission's current
progress blob and a snapshot of the profile progression. It returns the new
progress and whether the mission became claimable, or None when the event
does not concern the mission.

Progress schemas:
  ROZRUCH_7_7     {streak, lastDay, completedDays}
  SIX_PILLARS     {required, completed, missing}
  WISHLIST_PRO    {itemsWithSizes, required, seenHashes}
  STREAK_RESCUER  {streak, required, freezesOwned}
  SECRET_HELPER   {members, required, memberKeys}
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from sizemissions.missions.events import MissionEvent


@dataclass(frozen=True)
class ProgressionSnapshot:
    xp: int = 0
    level: int = 1
    current_streak: int = 0
    best_streak: int = 0
    freezes_owned: int = 0
    freezes_used: int = 0


@dataclass(frozen=True)
class EvaluationContext:
    event: MissionEvent
    progress: dict[str, Any]
    status: str
    # UTC day the event is credited to: the processing day, not the client createdAt
    activity_day: date
    progression: ProgressionSnapshot = field(default_factory=ProgressionSnapshot)


@dataclass(frozen=True)
class EvaluationResult:
    progress: dict[str, Any]
    claimable: bool
    log: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MissionEvaluator:
    code: str
    event_types: frozenset[str]
    evaluate: Callable[[EvaluationContext], EvaluationResult | None]

    def handles(self, event_type: str) -> bool:
        return event_type in self.event_types


EVALUATORS: dict[str, MissionEvaluator] = {}


def register(code: str, *event_types: str) -> Callable:
    """Register an evaluator for a mission code."""

    def decorator(fn: Callable[[EvaluationContext], EvaluationResult | None]) -> Callable:
        EVALUATORS[code] = MissionEvaluator(code=code, event_types=frozenset(event_types), evaluate=fn)
        return fn

    return decorator


def run_evaluator(code: str, context: EvaluationContext) -> EvaluationResult | None:
    """Run the evaluator registered for `code`, skipping already-counted unique hashes."""
    evaluator = EVALUATORS.get(code)
    if evaluator is None or not evaluator.handles(context.event.type):
        return None

    unique_hash = context.event.payload.unique_hash
    if unique_hash and unique_hash in context.progress.get("seenHashes", []):
        return None

    return evaluator.evaluate(context)


# ---------------------------------------------------------------------------
# ROZRUCH_7_7: an item a day for seven consecutive days
# ---------------------------------------------------------------------------

ROZRUCH_REQUIRED_DAYS = 7
ROZRUCH_MIN_FIELDS = 3


@register("ROZRUCH_7_7", "ITEM_CREATED")
def evaluate_rozruch(context: EvaluationContext) -> EvaluationResult | None:
    payload = context.event.payload
    if payload.field_count < ROZRUCH_MIN_FIELDS and not payload.critical_field_completed:
        return None

    day = context.activity_day
    completed_days = set(context.progress.get("completedDays", []))
    if day.isoformat() in completed_days:
        return None

    last_day_raw = context.progress.get("lastDay")
    streak = int(context.progress.get("streak", 0))
    if last_day_raw is None:
        streak = 1
    else:
        gap = (day - date.fromisoformat(last_day_raw)).days
        if gap <= 0:
            return None
        streak = streak + 1 if gap == 1 else 1

    completed_days.add(day.isoformat())
    progress = {
        "streak": streak,
        "lastDay": day.isoformat(),
        "completedDays": sorted(completed_days),
    }
    return EvaluationResult(
        progress=progress,
        claimable=streak >= ROZRUCH_REQUIRED_DAYS,
        log={"streak": streak, "day": day.isoformat()},
    )


# ---------------------------------------------------------------------------
# SIX_PILLARS: one item in each key category
# ---------------------------------------------------------------------------

SIX_PILLARS_REQUIRED: tuple[str, ...] = ("outerwear", "tops", "bottoms", "headwear", "accessories", "footwear")


@register("SIX_PILLARS", "ITEM_CREATED")
def evaluate_six_pillars(context: EvaluationContext) -> EvaluationResult | None:
    category = context.event.payload.category.lower()
    present = set(context.progress.get("completed", []))
    if category not in SIX_PILLARS_REQUIRED or category in present:
        return None

    present.add(category)
    completed = [c for c in SIX_PILLARS_REQUIRED if c in present]
    missing = [c for c in SIX_PILLARS_REQUIRED if c not in present]
    return EvaluationResult(
        progress={"required": list(SIX_PILLARS_REQUIRED), "completed": completed, "missing": missing},
        claimable=not missing,
        log={"category": category, "missing": len(missing)},
    )


# ---------------------------------------------------------------------------
# WISHLIST_PRO: five wishlist items linked to a size
# ---------------------------------------------------------------------------

WISHLIST_PRO_REQUIRED = 5


@register("WISHLIST_PRO", "ITEM_CREATED")
def evaluate_wishlist_pro(context: EvaluationContext) -> EvaluationResult | None:
    payload = context.event.payload
    if payload.source != "wishlist" or not payload.matched_size:
        return None

    seen = list(context.progress.get("seenHashes", []))
    if payload.unique_hash:
        seen.append(payload.unique_hash)
    count = int(context.progress.get("itemsWithSizes", 0)) + 1
    return EvaluationResult(
        progress={"itemsWithSizes": count, "required": WISHLIST_PRO_REQUIRED, "seenHashes": seen},
        claimable=count >= WISHLIST_PRO_REQUIRED,
        log={"itemsWithSizes": count, "wishlistId": payload.wishlist_id},
    )


# ---------------------------------------------------------------------------
# STREAK_RESCUER: fourteen active days in a row
# ---------------------------------------------------------------------------

STREAK_REQUIRED_DAYS = 14


@register("STREAK_RESCUER", "ITEM_CREATED")
def evaluate_streak_rescuer(context: EvaluationContext) -> EvaluationResult | None:
    category = context.event.payload.category
    if not category or category == "wishlist-share":
        return None

    streak = context.progression.current_streak
    return EvaluationResult(
        progress={
            "streak": streak,
            "required": STREAK_REQUIRED_DAYS,
            "freezesOwned": context.progression.freezes_owned,
        },
        claimable=streak >= STREAK_REQUIRED_DAYS,
        log={"streak": streak},
    )


# ---------------------------------------------------------------------------
# SECRET_HELPER: share the size profile with a trusted person
# ---------------------------------------------------------------------------

SECRET_HELPER_REQUIRED = 1


@register("SECRET_HELPER", "ITEM_CREATED")
def evaluate_secret_helper(context: EvaluationContext) -> EvaluationResult | None:
    payload = context.event.payload
    if payload.source != "trusted_circle":
        return None

    member_key = payload.unique_hash or payload.subtype
    members = list(context.progress.get("memberKeys", []))
    if member_key and member_key in members:
        return None
    if member_key:
        members.append(member_key)
    count = int(context.progress.get("members", 0)) + 1
    return EvaluationResult(
        progress={"members": count, "required": SECRET_HELPER_REQUIRED, "memberKeys": members},
        claimable=count >= SECRET_HELPER_REQUIRED,
        log={"members": count},
    )
