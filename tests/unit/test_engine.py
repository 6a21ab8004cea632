"""Mission state machine: initial status, lazy expiry, start and claim planning."""

from datetime import datetime, timedelta, timezone

import pytest

from sizemissions.missions.catalog import build_definition, find_mission_definition
from sizemissions.missions.engine import (
    STATUSES,
    AuditAction,
    FreezeGrantAction,
    MissionStateSnapshot,
    NotifyAction,
    RewardAction,
    StreakIncrementAction,
    determine_initial_status,
    effective_status,
    ensure_utc,
    plan_claim,
    plan_progress,
    plan_start,
)
from sizemissions.missions.exceptions import InvalidTransitionError

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)

BOOTS = find_mission_definition("STEP_INTO_BOOTS")  # seasonal, Nov-Feb
ROZRUCH = find_mission_definition("ROZRUCH_7_7")  # one-shot
SIX_PILLARS = find_mission_definition("SIX_PILLARS")  # repeatable, 90 day cooldown
STREAK_RESCUER = find_mission_definition("STREAK_RESCUER")
INVITE = find_mission_definition("INVITE_AND_MEASURE")  # repeatable, no cooldown

WEEKLY = build_definition({
    "code": "WEEKLY_CHECK",
    "category": "core",
    "repeatable": True,
    "cooldown_days": 7,
    "rewards": {"xp": 30},
})


def state(status: str, **kwargs) -> MissionStateSnapshot:
    return MissionStateSnapshot(status=status, **kwargs)


class TestInitialStatus:
    @pytest.mark.parametrize("month", [12, 1])
    def test_winter_season_open(self, month):
        assert determine_initial_status(BOOTS, datetime(2026, month, 10, tzinfo=timezone.utc)) == "available"

    def test_winter_season_closed_in_june(self):
        assert determine_initial_status(BOOTS, NOW) == "hidden"

    def test_non_seasonal_always_available(self):
        assert determine_initial_status(ROZRUCH, NOW) == "available"

    def test_month_is_taken_in_utc(self):
        # 2026-02-28 23:30 UTC is March 1st in UTC+2 but still February in UTC
        local = datetime(2026, 3, 1, 1, 30, tzinfo=timezone(timedelta(hours=2)))
        assert determine_initial_status(BOOTS, local) == "available"


class TestEffectiveStatus:
    def test_cooldown_not_elapsed(self):
        s = state("cooldown", next_eligible_at=NOW + timedelta(hours=1))
        assert effective_status(SIX_PILLARS, s, NOW) == "cooldown"

    def test_cooldown_elapsed_reads_available(self):
        s = state("cooldown", next_eligible_at=NOW - timedelta(seconds=1))
        assert effective_status(SIX_PILLARS, s, NOW) == "available"

    def test_cooldown_elapsed_out_of_season_reads_hidden(self):
        s = state("cooldown", next_eligible_at=NOW - timedelta(days=1))
        assert effective_status(BOOTS, s, NOW) == "hidden"

    def test_hidden_revalidated_when_season_opens(self):
        december = datetime(2026, 12, 1, tzinfo=timezone.utc)
        assert effective_status(BOOTS, state("hidden"), december) == "available"

    def test_available_hidden_after_season_closes(self):
        assert effective_status(BOOTS, state("available"), NOW) == "hidden"

    @pytest.mark.parametrize("status", ["in_progress", "claimable", "completed", "locked"])
    def test_other_statuses_pass_through(self, status):
        assert effective_status(BOOTS, state(status), NOW) == status

    def test_naive_eligible_at_treated_as_utc(self):
        s = state("cooldown", next_eligible_at=(NOW - timedelta(minutes=5)).replace(tzinfo=None))
        assert effective_status(SIX_PILLARS, s, NOW) == "available"

    def test_ensure_utc(self):
        assert ensure_utc(None) is None
        assert ensure_utc(datetime(2026, 1, 1)).tzinfo is timezone.utc


class TestPlanStart:
    def test_available_to_in_progress(self):
        decision = plan_start(ROZRUCH, state("available"), NOW)
        assert decision.changed
        assert decision.next_status == "in_progress"
        assert decision.started_at == NOW
        assert decision.actions == (AuditAction("MISSION_STARTED", {"code": "ROZRUCH_7_7"}),)

    @pytest.mark.parametrize("status", ["in_progress", "claimable", "completed"])
    def test_noop_statuses(self, status):
        started = NOW - timedelta(days=2)
        decision = plan_start(ROZRUCH, state(status, started_at=started, progress={"streak": 2}), NOW)
        assert not decision.changed
        assert decision.next_status == status
        assert decision.started_at == started
        assert decision.progress == {"streak": 2}
        assert decision.actions == ()

    def test_start_twice_is_idempotent(self):
        first = plan_start(ROZRUCH, state("available"), NOW)
        after_first = state(first.next_status, started_at=first.started_at)
        second = plan_start(ROZRUCH, after_first, NOW + timedelta(minutes=1))
        assert second.next_status == first.next_status == "in_progress"
        assert second.started_at == first.started_at
        assert not second.changed

    @pytest.mark.parametrize("status", ["cooldown", "locked"])
    def test_conflict_statuses(self, status):
        s = state(status, next_eligible_at=NOW + timedelta(days=3) if status == "cooldown" else None)
        with pytest.raises(InvalidTransitionError):
            plan_start(SIX_PILLARS, s, NOW)

    def test_hidden_seasonal_cannot_start(self):
        with pytest.raises(InvalidTransitionError):
            plan_start(BOOTS, state("hidden"), NOW)

    def test_elapsed_cooldown_can_start(self):
        s = state("cooldown", next_eligible_at=NOW - timedelta(days=1))
        decision = plan_start(SIX_PILLARS, s, NOW)
        assert decision.next_status == "in_progress"
        assert decision.next_eligible_at is None


class TestPlanClaim:
    @pytest.mark.parametrize("status", ["available", "in_progress", "completed", "hidden", "locked"])
    def test_only_claimable_can_claim(self, status):
        with pytest.raises(InvalidTransitionError):
            plan_claim(ROZRUCH, state(status), NOW)

    def test_non_repeatable_completes(self):
        decision = plan_claim(ROZRUCH, state("claimable", attempts=0, progress={"streak": 7}), NOW)
        assert decision.next_status == "completed"
        assert decision.next_eligible_at is None
        assert decision.completed_at == NOW
        assert decision.attempts == 1
        assert decision.progress == {}
        reward = decision.actions_of(RewardAction)[0]
        assert reward.xp == 100
        assert reward.rewards == {"xp": 100, "badges": ["ROZGRZANY"]}
        assert decision.actions_of(FreezeGrantAction) == []

    def test_cooldown_seven_days(self):
        decision = plan_claim(WEEKLY, state("claimable"), NOW)
        assert decision.next_status == "cooldown"
        assert decision.next_eligible_at == NOW + timedelta(days=7)
        # Lazy expiry: read after the deadline without any reset
        after = MissionStateSnapshot(status=decision.next_status, next_eligible_at=decision.next_eligible_at)
        assert effective_status(WEEKLY, after, NOW + timedelta(days=7, seconds=1)) == "available"
        assert effective_status(WEEKLY, after, NOW + timedelta(days=6)) == "cooldown"

    def test_repeatable_without_cooldown_returns_to_initial(self):
        decision = plan_claim(INVITE, state("claimable", attempts=3), NOW)
        assert decision.next_status == "available"
        assert decision.next_eligible_at is None
        assert decision.attempts == 4

    def test_freeze_reward_and_streak_increment(self):
        decision = plan_claim(STREAK_RESCUER, state("claimable", streak_counter=2), NOW)
        assert decision.actions_of(FreezeGrantAction) == [FreezeGrantAction(1)]
        assert decision.actions_of(StreakIncrementAction) == [StreakIncrementAction(1)]
        assert decision.streak_counter == 3
        assert decision.actions_of(RewardAction)[0].xp == 0

    def test_streak_counter_carried_for_other_categories(self):
        decision = plan_claim(SIX_PILLARS, state("claimable", streak_counter=5), NOW)
        assert decision.streak_counter == 5
        assert decision.actions_of(StreakIncrementAction) == []

    def test_notify_and_audit(self):
        decision = plan_claim(SIX_PILLARS, state("claimable"), NOW)
        notify = decision.actions_of(NotifyAction)[0]
        assert notify.payload["code"] == "SIX_PILLARS"
        assert notify.payload["xp"] == 150
        audit = decision.actions_of(AuditAction)[0]
        assert audit.event_type == "MISSION_CLAIMED"
        assert audit.payload["nextStatus"] == "cooldown"


class TestPlanProgress:
    def test_first_progress_starts_mission(self):
        decision = plan_progress(
            SIX_PILLARS, state("available"), {"completed": ["tops"]}, False, NOW, "ITEM_CREATED", {},
        )
        assert decision.next_status == "in_progress"
        assert decision.started_at == NOW

    def test_threshold_makes_claimable(self):
        decision = plan_progress(SIX_PILLARS, state("in_progress", started_at=NOW), {}, True, NOW, "ITEM_CREATED", {})
        assert decision.next_status == "claimable"

    def test_claimable_stays_claimable(self):
        decision = plan_progress(STREAK_RESCUER, state("claimable"), {"streak": 1}, False, NOW, "ITEM_CREATED", {})
        assert decision.next_status == "claimable"

    @pytest.mark.parametrize("status", ["completed", "locked"])
    def test_inactive_statuses_rejected(self, status):
        with pytest.raises(InvalidTransitionError):
            plan_progress(ROZRUCH, state(status), {}, True, NOW, "ITEM_CREATED", {})

    def test_audit_carries_event_type(self):
        decision = plan_progress(ROZRUCH, state("available"), {}, False, NOW, "ITEM_CREATED", {"day": "x"})
        assert decision.actions == (AuditAction("ITEM_CREATED", {"day": "x"}),)

    def test_empty_log_still_audited(self):
        decision = plan_progress(ROZRUCH, state("in_progress"), {}, False, NOW, "ITEM_CREATED", {})
        assert decision.actions == (AuditAction("ITEM_CREATED", {}),)


class TestStatusSet:
    @pytest.mark.parametrize("definition", [ROZRUCH, SIX_PILLARS, INVITE, WEEKLY])
    def test_claim_targets_known_status(self, definition):
        decision = plan_claim(definition, state("claimable"), NOW)
        assert decision.next_status in STATUSES
