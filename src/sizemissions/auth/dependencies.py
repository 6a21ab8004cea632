"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from sizemissions.auth.jwt import verify_token
from sizemissions.database import get_session
from sizemissions.db.models import Profile
from sizemissions.missions.exceptions import ProfileNotFoundError
from sizemissions.missions.mission_service import resolve_profile

_bearer = HTTPBearer()


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> Profile:
    """Verify the bearer token and load the caller's profile. 401 on bad token, 404 on unknown profile."""
    try:
        payload = verify_token(credentials.credentials, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    try:
        return await resolve_profile(db, str(payload["sub"]))
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail="Profile not found") from e
