"""
Reminder Service - evening nudges for streaks at risk.

Simple flow:
1. Select streaks with current_streak > 0 and no activity today
2. Emit STREAK_REMINDER
3. If the streak length is a milestone (7, 14, 21, 30, 100, 365),
   also emit STREAK_MILESTONE_AT_RISK

Dedupe keys are per (user, type, day), so running it several times the same
evening sends each reminder once.
"""

import logging
from datetime import datetime

from src.core.domain import notifications
from src.core.domain.calendar import to_day
from src.services.notifier import Notifier
from src.storage.streak_repo import StreakRepository

logger = logging.getLogger(__name__)


async def send_streak_reminders(
    now: datetime,
    repo: StreakRepository | None = None,
    notifier: Notifier | None = None,
) -> dict[str, int]:
    """
    Remind users whose streak ends tonight unless they log something.

    Returns:
        Stats: {"reminded": N, "milestones": N}
    """
    repo = repo or StreakRepository()
    notifier = notifier or Notifier()
    today = to_day(now)
    stats = {"reminded": 0, "milestones": 0}

    for record in await repo.list_at_risk(today):
        streak = record.current_streak

        if await notifier.emit(notifications.streak_reminder(record.user_id, streak, today)):
            stats["reminded"] += 1

        if notifications.is_milestone(streak):
            if await notifier.emit(
                notifications.milestone_at_risk(record.user_id, streak, today)
            ):
                stats["milestones"] += 1

    logger.info(
        f"Reminders processed: {stats['reminded']} reminded, "
        f"{stats['milestones']} milestone warnings"
    )
    return stats
