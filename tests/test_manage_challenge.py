"""Tests for creating and joining challenges."""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import day
from src.core.use_cases.manage_challenge import (
    CreateChallengeUseCase,
    JoinChallengeUseCase,
)
from src.database.models import ChallengeParticipant, ExerciseType

NOW = day(0)


async def create(**overrides):
    params = {
        "creator_id": 1,
        "name": "March Push",
        "exercise_type": ExerciseType.PUSH_UPS,
        "goal_amount": 500,
        "start_date": day(0),
        "end_date": day(30),
    }
    params.update(overrides)
    return await CreateChallengeUseCase().execute(**params)


@pytest.mark.asyncio
async def test_creator_auto_joins(db) -> None:
    result = await create(name="  March Push  ", description="500 in a month")

    assert result.success
    assert result.challenge.name == "March Push"
    assert result.challenge.creator_id == 1
    participants = await ChallengeParticipant.filter(challenge_id=result.challenge.id)
    assert [p.user_id for p in participants] == [1]
    assert participants[0].current_progress == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"name": "ab"}, "Name must be at least 3 characters"),
        ({"goal_amount": 0}, "Goal must be at least 1"),
        ({"end_date": day(0)}, "End date must be after start date"),
    ],
)
async def test_create_validation(db, overrides, message) -> None:
    result = await create(**overrides)

    assert not result.success
    assert result.error_message == message
    assert result.challenge is None


@pytest.mark.asyncio
async def test_join_challenge(db) -> None:
    challenge = (await create()).challenge
    use_case = JoinChallengeUseCase()

    joined = await use_case.execute(challenge.id, 2, NOW)
    again = await use_case.execute(challenge.id, 2, NOW)

    assert joined.success
    assert joined.participant.user_id == 2
    assert not again.success
    assert again.error_message == "You have already joined this challenge"
    assert await ChallengeParticipant.filter(challenge_id=challenge.id).count() == 2


@pytest.mark.asyncio
async def test_join_missing_or_ended_challenge(db, make_challenge) -> None:
    ended = await make_challenge({}, start=day(-10), end=day(-1))
    use_case = JoinChallengeUseCase()

    missing = await use_case.execute(9999, 2, NOW)
    late = await use_case.execute(ended.id, 2, NOW)

    assert missing.error_message == "Challenge not found"
    assert late.error_message == "This challenge has already ended"


@pytest.mark.asyncio
async def test_join_compares_end_date_as_an_instant(db) -> None:
    plus_five = timezone(timedelta(hours=5))
    # Ends 2026-03-08 22:00 UTC
    challenge = (
        await create(
            start_date=datetime(2026, 3, 1, 9, 0, tzinfo=plus_five),
            end_date=datetime(2026, 3, 9, 3, 0, tzinfo=plus_five),
        )
    ).challenge

    late = await JoinChallengeUseCase().execute(
        challenge.id, 2, datetime(2026, 3, 8, 23, 0, tzinfo=timezone.utc)
    )

    assert late.error_message == "This challenge has already ended"
