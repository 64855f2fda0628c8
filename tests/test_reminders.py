"""Tests for evening streak reminders."""

import pytest

from conftest import day
from src.core.domain.streak_rules import StreakSnapshot
from src.database.models import Notification, NotificationType
from src.services.reminders import send_streak_reminders
from src.storage.streak_repo import StreakRepository

EVENING = day(1, hour=20)


async def seed(user_id: int, current: int, last_day_offset: int) -> None:
    last = day(last_day_offset).date()
    await StreakRepository().create(
        user_id,
        StreakSnapshot(
            current_streak=current,
            longest_streak=current,
            last_activity_date=last,
            streak_start_date=last,
        ),
    )


@pytest.mark.asyncio
async def test_reminds_only_streaks_without_activity_today(db) -> None:
    await seed(1, current=4, last_day_offset=0)  # yesterday
    await seed(2, current=3, last_day_offset=1)  # already active today
    await seed(3, current=0, last_day_offset=-5)  # broken

    stats = await send_streak_reminders(EVENING)

    assert stats == {"reminded": 1, "milestones": 0}
    reminder = await Notification.get(user_id=1)
    assert reminder.type == NotificationType.STREAK_REMINDER
    assert "4 day streak" in reminder.content


@pytest.mark.asyncio
async def test_milestone_streak_gets_extra_warning(db) -> None:
    await seed(1, current=7, last_day_offset=0)

    stats = await send_streak_reminders(EVENING)

    assert stats == {"reminded": 1, "milestones": 1}
    types = {n.type for n in await Notification.filter(user_id=1)}
    assert types == {
        NotificationType.STREAK_REMINDER,
        NotificationType.STREAK_MILESTONE_AT_RISK,
    }


@pytest.mark.asyncio
async def test_rerun_same_evening_sends_nothing_new(db) -> None:
    await seed(1, current=14, last_day_offset=0)

    await send_streak_reminders(EVENING)
    await send_streak_reminders(day(1, hour=22))

    assert await Notification.filter(user_id=1).count() == 2

    # Next evening is a new day
    await send_streak_reminders(day(2, hour=20))
    assert await Notification.filter(user_id=1).count() == 4
