"""
Daily Streak Sweep - decays or freezes streaks nobody touched.

The streak state machine only runs when an activity arrives. This sweep
catches users who missed a whole day:
1. Select streaks with last activity strictly before yesterday,
   not frozen and with something left to protect
2. Freeze banked -> spend it and hold the streak (is_frozen=True)
3. No freeze -> break the streak (current_streak=0)

Safe to rerun: processed rows no longer match the selection, and every
run re-queries instead of keeping a worklist, so a restart mid-sweep
simply resumes.
"""

import logging
from datetime import datetime

from src.config import config
from src.core.domain.calendar import yesterday
from src.core.domain.streak_rules import (
    StreakSnapshot,
    Transition,
    apply_daily_decay,
)
from src.core.errors import StaleWriteError
from src.database.models import StreakRecord
from src.storage.streak_repo import StreakRepository

logger = logging.getLogger(__name__)


async def reconcile_streaks(
    now: datetime,
    repo: StreakRepository | None = None,
    max_attempts: int | None = None,
) -> dict[str, int]:
    """
    Run the daily streak sweep as of `now`.

    Returns:
        Stats: {"frozen": N, "reset": N, "skipped": N, "failed": N}
    """
    repo = repo or StreakRepository()
    max_attempts = max_attempts or config.STALE_WRITE_RETRIES
    stats = {"frozen": 0, "reset": 0, "skipped": 0, "failed": 0}

    records = await repo.list_needing_reconciliation(yesterday(now))

    for record in records:
        try:
            kind = await _reconcile_one(repo, record, now, max_attempts)
        except Exception as e:
            logger.exception(f"Failed to reconcile streak of user {record.user_id}: {e}")
            stats["failed"] += 1
            continue

        if kind == Transition.FROZEN:
            stats["frozen"] += 1
        elif kind == Transition.DECAYED:
            stats["reset"] += 1
        else:
            stats["skipped"] += 1

    logger.info(
        f"Streak sweep done: {stats['frozen']} frozen, {stats['reset']} reset, "
        f"{stats['skipped']} skipped, {stats['failed']} failed"
    )
    return stats


async def _reconcile_one(
    repo: StreakRepository, record: StreakRecord, now: datetime, max_attempts: int
) -> Transition:
    for _ in range(max_attempts):
        transition = apply_daily_decay(StreakSnapshot.from_record(record), now)
        if not transition.changed:
            # An activity arrived since the query, nothing to do anymore
            return transition.kind

        if await repo.compare_and_set(record, transition.snapshot):
            logger.info(
                f"Streak of user {record.user_id} {transition.kind.value} "
                f"({record.current_streak} days, {record.freezes_available} freezes left)"
            )
            return transition.kind

        fresh = await repo.get(record.user_id)
        if fresh is None:
            return Transition.UNCHANGED
        record = fresh

    raise StaleWriteError("StreakRecord", record.user_id, max_attempts)
