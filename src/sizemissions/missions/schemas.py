"""Pydantic request/response models for mission endpoints.

Responses are serialized in camelCase for the web and mobile clients.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Missions ---


class SeasonWindow(CamelModel):
    start_month: int
    end_month: int


class MissionTranslationView(CamelModel):
    locale: str
    title: str
    summary: str
    reward_short: str | None = None
    cta_label: str | None = None


class MissionUserStateView(CamelModel):
    status: str
    progress: dict[str, Any] = {}
    streak_counter: int = 0
    attempts: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None
    next_eligible_at: datetime | None = None
    last_event_at: datetime | None = None


class MissionView(CamelModel):
    id: int
    code: str
    status: str
    category: str
    difficulty: str
    repeatable: bool
    cooldown_days: int
    season: SeasonWindow | None = None
    rules: dict[str, Any] = {}
    rewards: dict[str, Any] = {}
    metadata: dict[str, Any] = {}
    translation: MissionTranslationView | None = None
    user_state: MissionUserStateView | None = None


class MissionListResponse(CamelModel):
    locale: str
    missions: list[MissionView]


class MissionResponse(CamelModel):
    mission: MissionView


class ClaimProgression(CamelModel):
    xp: int
    level: int
    freeze_tokens_owned: int
    xp_awarded: int
    freeze_tokens_awarded: int


class ClaimResponse(CamelModel):
    mission: MissionView
    progression: ClaimProgression


# --- Events ---


class MissionEventRequest(BaseModel):
    type: str
    payload: Any = None


class MissionEventResponse(CamelModel):
    ok: bool = True


# --- Levels & progression ---


class LevelEntry(CamelModel):
    level: int
    title: str
    xp: int


class AllLevelsResponse(CamelModel):
    levels: list[LevelEntry]


class ProgressionResponse(CamelModel):
    xp: int
    level: int
    title: str
    current_floor: int
    next_level_xp: int | None
    progress_to_next: float
    current_streak: int
    best_streak: int
    freezes_owned: int
    freezes_used: int
    freezes_available: int
    last_active_date: date | None = None
    last_reward_claim_at: datetime | None = None


class RewardEntry(CamelModel):
    id: int
    mission_code: str
    source: str
    xp: int
    rewards: dict[str, Any] = {}
    created_at: datetime


class RewardHistoryResponse(CamelModel):
    rewards: list[RewardEntry]
    total: int
    page: int
    per_page: int
