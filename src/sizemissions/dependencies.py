"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator

from sizemissions.redis_client import get_redis_or_none


async def get_redis_dep() -> AsyncGenerator[object | None, None]:
    """Yield the Redis client (or None when Redis is not configured)."""
    yield get_redis_or_none()
