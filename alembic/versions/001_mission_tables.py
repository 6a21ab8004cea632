"""Mission tables.

Creates profiles (narrow copy owned by the profile service), missions,
mission_translations, user_mission_states, mission_reward_ledger,
mission_progress_events and profile_progression.

Revision ID: 001_mission_tables
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_mission_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Profiles ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS profiles (
            id VARCHAR(36) PRIMARY KEY,
            display_name VARCHAR(64),
            locale VARCHAR(8) NOT NULL DEFAULT 'pl',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Mission catalog ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS missions (
            id SERIAL PRIMARY KEY,
            code VARCHAR(64) UNIQUE NOT NULL,
            category VARCHAR(32) NOT NULL,
            difficulty VARCHAR(16) NOT NULL,
            repeatable BOOLEAN NOT NULL DEFAULT false,
            cooldown_days INTEGER NOT NULL DEFAULT 0 CHECK (cooldown_days >= 0),
            season_start_month SMALLINT CHECK (season_start_month BETWEEN 1 AND 12),
            season_end_month SMALLINT CHECK (season_end_month BETWEEN 1 AND 12),
            rules JSONB NOT NULL DEFAULT '{}',
            rewards JSONB NOT NULL DEFAULT '{}',
            metadata JSONB NOT NULL DEFAULT '{}',
            display_order INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS mission_translations (
            id SERIAL PRIMARY KEY,
            mission_id INTEGER NOT NULL REFERENCES missions(id) ON DELETE CASCADE,
            locale VARCHAR(8) NOT NULL,
            title VARCHAR(128) NOT NULL,
            summary TEXT NOT NULL,
            reward_short VARCHAR(128),
            cta_label VARCHAR(64),
            CONSTRAINT mission_translations_mission_id_locale_key UNIQUE (mission_id, locale)
        )
    """)

    # --- Per-profile state ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_mission_states (
            id BIGSERIAL PRIMARY KEY,
            profile_id VARCHAR(36) NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
            mission_id INTEGER NOT NULL REFERENCES missions(id) ON DELETE CASCADE,
            status VARCHAR(16) NOT NULL,
            progress JSONB NOT NULL DEFAULT '{}',
            streak_counter INTEGER NOT NULL DEFAULT 0,
            attempts INTEGER NOT NULL DEFAULT 0,
            started_at TIMESTAMPTZ,
            completed_at TIMESTAMPTZ,
            next_eligible_at TIMESTAMPTZ,
            last_event_at TIMESTAMPTZ,
            updated_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT user_mission_states_profile_id_mission_id_key UNIQUE (profile_id, mission_id),
            CONSTRAINT user_mission_states_cooldown_check
                CHECK ((status = 'cooldown') = (next_eligible_at IS NOT NULL))
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_mission_states_profile
        ON user_mission_states(profile_id)
    """)

    # --- Rewards ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS mission_reward_ledger (
            id BIGSERIAL PRIMARY KEY,
            profile_id VARCHAR(36) NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
            mission_id INTEGER NOT NULL REFERENCES missions(id),
            source VARCHAR(32) NOT NULL,
            xp INTEGER NOT NULL,
            rewards JSONB NOT NULL DEFAULT '{}',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_mission_reward_ledger_profile
        ON mission_reward_ledger(profile_id, created_at DESC)
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS mission_progress_events (
            id BIGSERIAL PRIMARY KEY,
            profile_id VARCHAR(36) NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
            mission_id INTEGER NOT NULL REFERENCES missions(id),
            event_type VARCHAR(32) NOT NULL,
            payload JSONB NOT NULL DEFAULT '{}',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS profile_progression (
            profile_id VARCHAR(36) PRIMARY KEY REFERENCES profiles(id) ON DELETE CASCADE,
            xp INTEGER NOT NULL DEFAULT 0 CHECK (xp >= 0),
            level INTEGER NOT NULL DEFAULT 1,
            current_streak INTEGER NOT NULL DEFAULT 0,
            best_streak INTEGER NOT NULL DEFAULT 0,
            freezes_owned INTEGER NOT NULL DEFAULT 0,
            freezes_used INTEGER NOT NULL DEFAULT 0,
            last_active_date DATE,
            last_reward_claim_at TIMESTAMPTZ,
            updated_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS profile_progression CASCADE")
    op.execute("DROP TABLE IF EXISTS mission_progress_events CASCADE")
    op.execute("DROP TABLE IF EXISTS mission_reward_ledger CASCADE")
    op.execute("DROP TABLE IF EXISTS user_mission_states CASCADE")
    op.execute("DROP TABLE IF EXISTS mission_translations CASCADE")
    op.execute("DROP TABLE IF EXISTS missions CASCADE")
    op.execute("DROP TABLE IF EXISTS profiles CASCADE")
