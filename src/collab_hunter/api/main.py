"""
Collab Hunter API.

Provides endpoints for:
- Mission query preview and execution (brand search, trends, IP scout, matchmaking)
- Free-text matchmaking
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from collab_hunter.api.routes import health, matchmake, missions
from collab_hunter.common.config import get_settings
from collab_hunter.common.logging_utils import configure_logging, get_logger
from collab_hunter.infrastructure.storage.redis.client import close_redis_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: configure logging.
    Shutdown: close the Redis connection if one was opened.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"[api] Starting Collab Hunter API (model={settings.model_name})")

    yield

    logger.info("[api] Shutting down...")
    await close_redis_client()
    logger.info("[api] Shutdown complete")


app = FastAPI(
    title="Collab Hunter API",
    description="Co-branding research missions with structured, validated results",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(missions.router)
app.include_router(matchmake.router)
