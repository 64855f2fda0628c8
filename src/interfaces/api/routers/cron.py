"""
Cron API router.

Endpoints:
- GET /api/cron/tick?token=... - Run all sweeps (for an external cron service)
"""

from fastapi import APIRouter, HTTPException, Query, status

from src.config import config
from src.services import scheduler

router = APIRouter(prefix="/api/cron", tags=["cron"])


@router.get("/tick")
async def cron_tick(token: str | None = Query(default=None)) -> dict:
    if not config.CRON_TOKEN or token != config.CRON_TOKEN.get_secret_value():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    stats = await scheduler.run_all_sweeps(scheduler.current_time())
    return {"status": "ok", "stats": stats}
