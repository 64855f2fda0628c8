"""
Scheduler Service - daily sweep timers.

Uses APScheduler 4.x (AsyncScheduler) with in-memory schedules:
- streak sweep       (STREAK_SWEEP_TIME)
- challenge sweeps   (CHALLENGE_SWEEP_TIME): finalize, ending soon, leaderboards
- streak reminders   (REMINDER_TIME)

AICODE-NOTE: The timers only read the wall clock and pass `now` down.
Every sweep is idempotent through its own query predicate, so an extra run
(restart, manual /api/cron/tick) is harmless. Sweeps are isolated from each
other: a failing sweep is logged and reported in the stats, the rest still run.
"""

import logging
from datetime import datetime, time
from typing import Awaitable, TypeVar

from apscheduler import AsyncScheduler, ConflictPolicy
from apscheduler.triggers.cron import CronTrigger

from src.config import config
from src.core.domain.calendar import canonical_tz, to_utc
from src.services import challenge_lifecycle, daily_sweep, reminders

logger = logging.getLogger(__name__)

T = TypeVar("T")

_scheduler: AsyncScheduler | None = None


def current_time() -> datetime:
    """Wall clock in the canonical timezone."""
    return datetime.now(canonical_tz())


# === Jobs ===


async def _guarded(name: str, sweep: Awaitable[T]) -> T | dict[str, str]:
    """Run one sweep; a failure is logged and reported, never propagated."""
    try:
        return await sweep
    except Exception as e:
        logger.exception(f"Sweep {name} failed: {e}")
        return {"error": str(e)}


async def _leaderboard_stats(now: datetime) -> dict[str, int]:
    boards = await challenge_lifecycle.refresh_leaderboards(now)
    return {"challenges": len(boards)}


async def run_streak_sweep() -> dict:
    logger.info("Running daily streak processing...")
    return await _guarded("streaks", daily_sweep.reconcile_streaks(current_time()))


async def run_challenge_sweeps() -> dict[str, dict]:
    now = current_time()
    logger.info("Running challenge lifecycle sweeps...")
    return {
        "finalized": await _guarded(
            "finalized", challenge_lifecycle.finalize_completed(now)
        ),
        "ending_soon": await _guarded(
            "ending_soon", challenge_lifecycle.notify_ending_soon(now)
        ),
        "leaderboards": await _guarded("leaderboards", _leaderboard_stats(now)),
    }


async def run_streak_reminders() -> dict:
    logger.info("Sending streak reminders...")
    return await _guarded(
        "reminders", reminders.send_streak_reminders(current_time())
    )


async def run_all_sweeps(now: datetime) -> dict[str, dict]:
    """
    Run every sweep as of `now` (used by the external cron tick).

    Reminders only go out once the local reminder time has passed.
    """
    stats: dict[str, dict] = {
        "streaks": await _guarded("streaks", daily_sweep.reconcile_streaks(now)),
        "finalized": await _guarded(
            "finalized", challenge_lifecycle.finalize_completed(now)
        ),
        "ending_soon": await _guarded(
            "ending_soon", challenge_lifecycle.notify_ending_soon(now)
        ),
    }
    local_time = to_utc(now).astimezone(canonical_tz()).time()
    if local_time >= _parse_hhmm(config.REMINDER_TIME):
        stats["reminders"] = await _guarded(
            "reminders", reminders.send_streak_reminders(now)
        )
    return stats


def _parse_hhmm(hhmm: str) -> time:
    hour, minute = map(int, hhmm.split(":"))
    return time(hour, minute)


def _cron(hhmm: str) -> CronTrigger:
    at = _parse_hhmm(hhmm)
    return CronTrigger(hour=at.hour, minute=at.minute, timezone=config.STREAK_TIMEZONE)


# === Lifecycle ===


async def start() -> None:
    """Start the scheduler (call on startup)."""
    global _scheduler
    _scheduler = AsyncScheduler()
    await _scheduler.__aenter__()

    await _scheduler.add_schedule(
        run_streak_sweep,
        trigger=_cron(config.STREAK_SWEEP_TIME),
        id="streak_sweep",
        conflict_policy=ConflictPolicy.replace,
    )
    await _scheduler.add_schedule(
        run_challenge_sweeps,
        trigger=_cron(config.CHALLENGE_SWEEP_TIME),
        id="challenge_sweeps",
        conflict_policy=ConflictPolicy.replace,
    )
    await _scheduler.add_schedule(
        run_streak_reminders,
        trigger=_cron(config.REMINDER_TIME),
        id="streak_reminders",
        conflict_policy=ConflictPolicy.replace,
    )

    await _scheduler.start_in_background()
    logger.info(
        f"Scheduler started: streaks at {config.STREAK_SWEEP_TIME}, "
        f"challenges at {config.CHALLENGE_SWEEP_TIME}, "
        f"reminders at {config.REMINDER_TIME} ({config.STREAK_TIMEZONE})"
    )


async def stop() -> None:
    """Stop the scheduler (call on shutdown)."""
    global _scheduler
    if _scheduler is not None:
        await _scheduler.__aexit__(None, None, None)
        _scheduler = None
    logger.info("Scheduler stopped")
