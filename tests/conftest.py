import os
import sys
from datetime import datetime, timedelta, timezone

import pytest_asyncio
from tortoise import Tortoise

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Monday 2026-03-02, 12:00 UTC (canonical timezone defaults to UTC)
MONDAY = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def day(offset: int, hour: int = 12) -> datetime:
    """MONDAY shifted by `offset` days, at `hour` UTC."""
    return (MONDAY + timedelta(days=offset)).replace(hour=hour)


@pytest_asyncio.fixture(scope="function")
async def db() -> None:
    """Lightweight in-memory DB per test."""
    await Tortoise.init(
        db_url="sqlite://:memory:", modules={"models": ["src.database.models"]}
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def user(db):
    """Create a test user."""
    from src.database.models import User

    return await User.create(id=1, username="runner", name="Alice")


@pytest_asyncio.fixture
async def make_challenge(db):
    """Factory: challenge with the given participants and progress."""
    from src.database.models import Challenge, ChallengeParticipant, ExerciseType, User

    async def _make(
        participants: dict[int, float] | None = None,
        creator_id: int = 100,
        goal_amount: float = 100,
        exercise_type: ExerciseType = ExerciseType.PUSH_UPS,
        start: datetime | None = None,
        end: datetime | None = None,
        name: str = "March Push",
    ) -> Challenge:
        await User.get_or_create(id=creator_id, defaults={"name": f"User {creator_id}"})
        challenge = await Challenge.create(
            name=name,
            type=exercise_type,
            goal_amount=goal_amount,
            start_date=start or day(-7),
            end_date=end or day(7),
            creator_id=creator_id,
        )
        for user_id, progress in (participants or {}).items():
            await User.get_or_create(id=user_id, defaults={"name": f"User {user_id}"})
            await ChallengeParticipant.create(
                challenge=challenge, user_id=user_id, current_progress=progress
            )
        return challenge

    return _make
