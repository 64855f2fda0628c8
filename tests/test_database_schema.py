"""
Schema checks: models vs. the tables Tortoise actually creates.

AICODE-NOTE: These tests catch migration drift and missing unique constraints.
The engine relies on the constraints (one streak per user, one participation
per challenge and user, one notification per dedupe key) for idempotency.
"""

import pytest
from tortoise.exceptions import IntegrityError, OperationalError

from conftest import day
from src.database.models import (
    Challenge,
    ChallengeParticipant,
    Notification,
    NotificationType,
    StreakRecord,
    User,
)


@pytest.mark.asyncio
async def test_all_models_have_tables(db):
    """Every model has a queryable table."""
    tables = {
        "users": User,
        "streaks": StreakRecord,
        "challenges": Challenge,
        "challenge_participants": ChallengeParticipant,
        "notifications": Notification,
    }

    for table_name, model in tables.items():
        try:
            await model.all().limit(1)
        except OperationalError as e:
            pytest.fail(f"Table '{table_name}' does not exist or has schema issues: {e}")


@pytest.mark.asyncio
async def test_streak_defaults(db, user):
    streak = await StreakRecord.create(user=user)

    fetched = await StreakRecord.get(id=streak.id)
    assert fetched.current_streak == 0
    assert fetched.longest_streak == 0
    assert fetched.last_activity_date is None
    assert fetched.is_frozen is False
    assert fetched.freezes_available == 0
    assert fetched.version == 0


@pytest.mark.asyncio
async def test_one_streak_per_user(db, user):
    await StreakRecord.create(user=user)

    with pytest.raises(IntegrityError):
        await StreakRecord.create(user=user)


@pytest.mark.asyncio
async def test_one_participation_per_challenge_and_user(db, user, make_challenge):
    challenge = await make_challenge({user.id: 0})

    with pytest.raises(IntegrityError):
        await ChallengeParticipant.create(challenge=challenge, user=user)


@pytest.mark.asyncio
async def test_notification_dedupe_key_is_unique(db, user):
    fields = {
        "user": user,
        "type": NotificationType.STREAK_REMINDER,
        "title": "Maintain Your Streak!",
        "content": "...",
        "dedupe_key": "STREAK_REMINDER:1:2026-03-02",
    }
    await Notification.create(**fields)

    with pytest.raises(IntegrityError):
        await Notification.create(**fields)


@pytest.mark.asyncio
async def test_challenge_fields_roundtrip(db, make_challenge):
    challenge = await make_challenge({}, goal_amount=42.5, start=day(-1), end=day(1))

    fetched = await Challenge.get(id=challenge.id)
    assert fetched.goal_amount == 42.5
    assert fetched.start_date.date() == day(-1).date()
    assert fetched.end_date.date() == day(1).date()
    assert fetched.winners_announced is False
    assert fetched.ending_soon_notified_at is None


@pytest.mark.asyncio
async def test_display_name_fallbacks(db):
    assert (await User.create(id=10, name="Bea", username="bea_runs")).display_name == "Bea"
    assert (await User.create(id=11, username="runner42")).display_name == "runner42"
    assert (await User.create(id=12)).display_name == "A user"
