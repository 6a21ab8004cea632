"""Mission API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sizemissions.auth.dependencies import get_current_profile
from sizemissions.config import get_settings
from sizemissions.database import get_session
from sizemissions.db.models import Profile
from sizemissions.dependencies import get_redis_dep
from sizemissions.missions import mission_service
from sizemissions.missions.events import parse_mission_event
from sizemissions.missions.exceptions import (
    EventValidationError,
    InvalidTransitionError,
    MissionNotFoundError,
    StorageFailureError,
)
from sizemissions.missions.leveling import LEVEL_THRESHOLDS, compute_level
from sizemissions.missions.progression_service import get_or_create_progression, list_rewards
from sizemissions.missions.schemas import (
    AllLevelsResponse,
    ClaimProgression,
    ClaimResponse,
    LevelEntry,
    MissionEventRequest,
    MissionEventResponse,
    MissionListResponse,
    MissionResponse,
    ProgressionResponse,
    RewardEntry,
    RewardHistoryResponse,
)

router = APIRouter(prefix="/api/v1", tags=["Missions"])


def _resolve_locale(profile: Profile, locale: str | None) -> str:
    settings = get_settings()
    if locale in settings.supported_locales:
        return locale  # type: ignore[return-value]
    if profile.locale in settings.supported_locales:
        return profile.locale
    return settings.default_locale


# ── Missions ──


@router.get("/missions", response_model=MissionListResponse)
async def list_missions(
    locale: str | None = Query(None),
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    """All missions with the caller's state, in catalog order."""
    resolved = _resolve_locale(profile, locale)
    try:
        missions = await mission_service.list_mission_views(db, profile.id, resolved)
    except StorageFailureError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return MissionListResponse(locale=resolved, missions=missions)


@router.post("/missions/events", response_model=MissionEventResponse)
async def post_mission_event(
    body: MissionEventRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    """Ingest a progress event. Processing completes before the response."""
    try:
        event = parse_mission_event(body.type, profile.id, body.payload)
    except EventValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        await mission_service.process_mission_event(db, event)
    except StorageFailureError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return MissionEventResponse(ok=True)


@router.get("/missions/{code}", response_model=MissionResponse)
async def get_mission(
    code: str,
    locale: str | None = Query(None),
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    resolved = _resolve_locale(profile, locale)
    try:
        mission = await mission_service.get_mission_view(db, profile.id, code, resolved)
    except MissionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return MissionResponse(mission=mission)


@router.post("/missions/{code}/start", response_model=MissionResponse)
async def start_mission(
    code: str,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    """Start a mission. Already started, claimable or completed missions are returned unchanged."""
    try:
        mission = await mission_service.start_mission(db, profile.id, code, _resolve_locale(profile, None))
    except MissionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except StorageFailureError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return MissionResponse(mission=mission)


@router.post("/missions/{code}/claim", response_model=ClaimResponse)
async def claim_mission(
    code: str,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Claim a claimable mission's rewards."""
    try:
        mission, outcome = await mission_service.claim_mission(
            db, redis, profile.id, code, _resolve_locale(profile, None),
        )
    except MissionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except StorageFailureError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    return ClaimResponse(
        mission=mission,
        progression=ClaimProgression(
            xp=outcome.xp,
            level=outcome.level,
            freeze_tokens_owned=outcome.freezes_owned,
            xp_awarded=outcome.xp_awarded,
            freeze_tokens_awarded=outcome.freeze_tokens_awarded,
        ),
    )


# ── Levels & progression ──


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels():
    """Level table (public)."""
    return AllLevelsResponse(
        levels=[LevelEntry(level=t["level"], title=t["title"], xp=t["xp"]) for t in LEVEL_THRESHOLDS],
    )


@router.get("/users/me/progression", response_model=ProgressionResponse)
async def get_my_progression(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    progression = await get_or_create_progression(db, profile.id)
    await db.commit()
    level_info = compute_level(progression.xp)
    return ProgressionResponse(
        xp=progression.xp,
        level=level_info["level"],
        title=level_info["title"],
        current_floor=level_info["current_floor"],
        next_level_xp=level_info["next_level_xp"],
        progress_to_next=level_info["progress_to_next"],
        current_streak=progression.current_streak,
        best_streak=progression.best_streak,
        freezes_owned=progression.freezes_owned,
        freezes_used=progression.freezes_used,
        freezes_available=max(0, progression.freezes_owned - progression.freezes_used),
        last_active_date=progression.last_active_date,
        last_reward_claim_at=progression.last_reward_claim_at,
    )


@router.get("/users/me/rewards", response_model=RewardHistoryResponse)
async def get_my_rewards(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1),
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_session),
):
    """Reward ledger history, newest first."""
    per_page = min(per_page, get_settings().rewards_page_max)
    rows, total = await list_rewards(db, profile.id, page, per_page)
    return RewardHistoryResponse(
        rewards=[
            RewardEntry(
                id=entry.id,
                mission_code=code,
                source=entry.source,
                xp=entry.xp,
                rewards=entry.rewards or {},
                created_at=entry.created_at,
            )
            for entry, code in rows
        ],
        total=total,
        page=page,
        per_page=per_page,
    )
