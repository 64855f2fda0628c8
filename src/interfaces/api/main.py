"""
FastAPI application for the FitStreak engine.

Exposes the streak projection, freeze awards, the exercise-logged hook,
challenge leaderboards and the cron tick.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from tortoise import Tortoise

from src.database.config import TORTOISE_ORM
from src.interfaces.api.routers import challenge, cron, exercise, streak

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await Tortoise.init(config=TORTOISE_ORM)
    logger.info("Database initialized for API")
    yield
    await Tortoise.close_connections()


app = FastAPI(
    title="FitStreak API",
    description="Streak & challenge progress engine",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.include_router(streak.router)
app.include_router(exercise.router)
app.include_router(challenge.router)
app.include_router(cron.router)


@app.get("/api/health")
async def api_health():
    """API health check endpoint."""
    return {"status": "ok", "service": "fitstreak-api"}
