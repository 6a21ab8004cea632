"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sizemissions.config import get_settings
from sizemissions.database import close_db, get_session, init_db
from sizemissions.health.router import router as health_router
from sizemissions.middleware import setup_middleware
from sizemissions.missions.router import router as missions_router
from sizemissions.missions.seed import seed_missions
from sizemissions.redis_client import close_redis, init_redis

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)

    # Redis is optional: without it there is no rate limiting and no broadcasts
    try:
        await init_redis(settings.redis_url)
    except Exception:
        logger.warning("Redis unavailable, running without rate limiting and broadcasts", exc_info=True)

    if settings.seed_missions_on_startup:
        try:
            async for db in get_session():
                await seed_missions(db)
                break
        except Exception:
            logger.warning("Mission seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Size Missions API",
        description="Mission progression, rewards and levels for size profiles",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(missions_router)

    return app


app = create_app()
