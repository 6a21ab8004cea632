"""ORM models for profiles, the mission catalog and per-profile mission progression.

Only `profiles` belongs to an external collaborator (profile storage); the
service reads it to resolve the caller and their locale.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sizemissions.db.base import Base, BigIntPK, JSONType


# ---------------------------------------------------------------------------
# Profiles (external, read-only from the mission engine's point of view)
# ---------------------------------------------------------------------------


class Profile(Base):
    """Size profile owned by an authenticated account."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    display_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    locale: Mapped[str] = mapped_column(String(8), nullable=False, server_default="pl")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


# ---------------------------------------------------------------------------
# Mission catalog
# ---------------------------------------------------------------------------


class Mission(Base):
    """Mission catalog row, upserted from the in-memory catalog on startup."""

    __tablename__ = "missions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(16), nullable=False)
    repeatable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cooldown_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    season_start_month: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    season_end_month: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    rules: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    rewards: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    mission_metadata: Mapped[dict[str, Any]] = mapped_column("metadata", JSONType, nullable=False, default=dict)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())

    translations: Mapped[list[MissionTranslation]] = relationship(
        "MissionTranslation", back_populates="mission", lazy="selectin"
    )


class MissionTranslation(Base):
    """Per-locale display text, UNIQUE(mission_id, locale)."""

    __tablename__ = "mission_translations"
    __table_args__ = (
        UniqueConstraint("mission_id", "locale", name="mission_translations_mission_id_locale_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    mission_id: Mapped[int] = mapped_column(Integer, ForeignKey("missions.id", ondelete="CASCADE"), nullable=False)
    locale: Mapped[str] = mapped_column(String(8), nullable=False)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    reward_short: Mapped[str | None] = mapped_column(String(128), nullable=True)
    cta_label: Mapped[str | None] = mapped_column(String(64), nullable=True)

    mission: Mapped[Mission] = relationship("Mission", back_populates="translations")


# ---------------------------------------------------------------------------
# Per-profile mission progression
# ---------------------------------------------------------------------------


class UserMissionState(Base):
    """One row per (profile, mission), UNIQUE(profile_id, mission_id).

    `next_eligible_at` is set if and only if status == 'cooldown'.
    """

    __tablename__ = "user_mission_states"
    __table_args__ = (
        UniqueConstraint("profile_id", "mission_id", name="user_mission_states_profile_id_mission_id_key"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    profile_id: Mapped[str] = mapped_column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    mission_id: Mapped[int] = mapped_column(Integer, ForeignKey("missions.id", ondelete="CASCADE"), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    progress: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    streak_counter: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    next_eligible_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_event_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())


class MissionRewardLedger(Base):
    """Append-only reward log. SUM(xp) per profile == profile_progression.xp."""

    __tablename__ = "mission_reward_ledger"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    profile_id: Mapped[str] = mapped_column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    mission_id: Mapped[int] = mapped_column(Integer, ForeignKey("missions.id"), nullable=False)
    source: Mapped[str] = mapped_column(String(32), nullable=False)
    xp: Mapped[int] = mapped_column(Integer, nullable=False)
    rewards: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class MissionProgressEvent(Base):
    """Audit trail of mission transitions. Written, never read back by the engine."""

    __tablename__ = "mission_progress_events"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    profile_id: Mapped[str] = mapped_column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    mission_id: Mapped[int] = mapped_column(Integer, ForeignKey("missions.id"), nullable=False)
    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class ProfileProgression(Base):
    """Denormalized progression summary: single row per profile, O(1) reads."""

    __tablename__ = "profile_progression"

    profile_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True
    )
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    best_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    freezes_owned: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    freezes_used: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_active_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_reward_claim_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), server_default=func.now())
