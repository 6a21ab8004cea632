"""Mission event parsing.

Events come from the client (POST /api/v1/missions/events) and from other
services. Validation happens before anything touches the database.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sizemissions.missions.exceptions import EventValidationError

EVENT_TYPES: frozenset[str] = frozenset({"ITEM_CREATED"})

# Tolerated client clock drift for createdAt.
MAX_CLOCK_SKEW = timedelta(minutes=5)

ItemSource = Literal["measurement", "garment", "size_label", "wishlist", "trusted_circle", "other"]


class ItemCreatedPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    source: ItemSource = "other"
    category: str = "other"
    subtype: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="createdAt")
    field_count: int = Field(default=0, ge=0, alias="fieldCount")
    critical_field_completed: bool = Field(default=False, alias="criticalFieldCompleted")
    unique_hash: str | None = Field(default=None, alias="uniqueHash")
    wishlist_id: str | None = Field(default=None, alias="wishlistId")
    matched_size: str | None = Field(default=None, alias="matchedSize")

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class MissionEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["ITEM_CREATED"]
    profile_id: str
    payload: ItemCreatedPayload

    def log_payload(self) -> dict[str, Any]:
        return self.payload.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_mission_event(
    event_type: str,
    profile_id: str,
    payload: Any,
    now: datetime | None = None,
) -> MissionEvent:
    """Validate a raw event. Raises EventValidationError for unknown types or bad payloads.

    `createdAt` may not lie in the future (beyond MAX_CLOCK_SKEW of `now`).
    """
    if event_type not in EVENT_TYPES:
        raise EventValidationError(f"Unsupported event type: {event_type}")
    if payload is None:
        raise EventValidationError("Missing event payload")
    if not isinstance(payload, dict):
        raise EventValidationError("Event payload must be an object")
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        event = MissionEvent(
            type=event_type,
            profile_id=profile_id,
            payload=ItemCreatedPayload.model_validate(payload),
        )
    except ValidationError as e:
        raise EventValidationError(f"Invalid {event_type} payload: {e.errors()[0]['msg']}") from e

    if event.payload.created_at > now + MAX_CLOCK_SKEW:
        raise EventValidationError("Event createdAt lies in the future")
    return event
