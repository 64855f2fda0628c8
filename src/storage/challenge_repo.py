"""
Challenge Repository - CRUD operations for Challenge and ChallengeParticipant.

AICODE-NOTE: This is a dumb repository layer - only database access,
no business logic. Services and use-cases orchestrate these operations.
Progress writes are conditional on `version` (see add_progress).
Every datetime is passed through to_utc() before it reaches a filter or a
write: SQLite compares stored timestamps as text.
"""

from datetime import datetime

from tortoise.expressions import F

from src.core.domain.calendar import to_utc
from src.database.models import Challenge, ChallengeParticipant, ExerciseType, User


class ChallengeRepository:
    """Tortoise-backed store of Challenge rows."""

    async def get(self, challenge_id: int) -> Challenge | None:
        """Get challenge by ID."""
        return await Challenge.get_or_none(id=challenge_id)

    async def create(
        self,
        creator_id: int,
        name: str,
        exercise_type: ExerciseType,
        goal_amount: float,
        start_date: datetime,
        end_date: datetime,
        description: str | None = None,
        is_public: bool = False,
    ) -> Challenge:
        await User.get_or_create(id=creator_id)
        return await Challenge.create(
            creator_id=creator_id,
            name=name,
            description=description,
            type=exercise_type,
            goal_amount=goal_amount,
            start_date=to_utc(start_date),
            end_date=to_utc(end_date),
            is_public=is_public,
        )

    async def is_open(self, challenge_id: int, now: datetime) -> bool:
        """Challenge exists and has not ended yet."""
        return await Challenge.filter(
            id=challenge_id, end_date__gte=to_utc(now)
        ).exists()

    async def list_active(self, now: datetime) -> list[Challenge]:
        return (
            await Challenge.filter(
                start_date__lte=to_utc(now), end_date__gte=to_utc(now)
            )
            .order_by("id")
            .all()
        )

    async def list_ending_between(
        self, start: datetime, end: datetime
    ) -> list[Challenge]:
        """Challenges ending inside [start, end] not yet warned about."""
        return (
            await Challenge.filter(
                end_date__gte=to_utc(start),
                end_date__lte=to_utc(end),
                ending_soon_notified_at__isnull=True,
            )
            .order_by("id")
            .all()
        )

    async def list_unannounced_ended(self, now: datetime) -> list[Challenge]:
        return (
            await Challenge.filter(end_date__lt=to_utc(now), winners_announced=False)
            .order_by("id")
            .all()
        )

    async def mark_winners_announced(self, challenge: Challenge) -> bool:
        """Flip the finalization latch. False if it was already set."""
        updated = await Challenge.filter(
            id=challenge.id, winners_announced=False
        ).update(winners_announced=True)
        challenge.winners_announced = True
        return updated == 1

    async def mark_ending_soon_notified(
        self, challenge: Challenge, now: datetime
    ) -> bool:
        updated = await Challenge.filter(
            id=challenge.id, ending_soon_notified_at__isnull=True
        ).update(ending_soon_notified_at=to_utc(now))
        challenge.ending_soon_notified_at = to_utc(now)
        return updated == 1


class ParticipantRepository:
    """Tortoise-backed store of ChallengeParticipant rows."""

    async def get(self, participant_id: int) -> ChallengeParticipant | None:
        return await ChallengeParticipant.get_or_none(
            id=participant_id
        ).prefetch_related("challenge")

    async def exists(self, challenge_id: int, user_id: int) -> bool:
        return await ChallengeParticipant.filter(
            challenge_id=challenge_id, user_id=user_id
        ).exists()

    async def create(self, challenge_id: int, user_id: int) -> ChallengeParticipant:
        """Raises tortoise IntegrityError if the user already joined."""
        await User.get_or_create(id=user_id)
        return await ChallengeParticipant.create(
            challenge_id=challenge_id, user_id=user_id
        )

    async def list_for_challenge(
        self, challenge_id: int
    ) -> list[ChallengeParticipant]:
        return (
            await ChallengeParticipant.filter(challenge_id=challenge_id)
            .prefetch_related("user")
            .order_by("id")
            .all()
        )

    async def list_active_for_user(
        self, user_id: int, exercise_type: ExerciseType, now: datetime
    ) -> list[ChallengeParticipant]:
        """Participations of `user_id` in running challenges of `exercise_type`."""
        return (
            await ChallengeParticipant.filter(
                user_id=user_id,
                challenge__type=exercise_type,
                challenge__start_date__lte=to_utc(now),
                challenge__end_date__gte=to_utc(now),
            )
            .prefetch_related("challenge")
            .order_by("id")
            .all()
        )

    async def add_progress(
        self, participant: ChallengeParticipant, amount: float, now: datetime
    ) -> bool:
        """
        Add `amount` only if the row still has `participant.version`.

        Returns:
            True if the write won (participant is updated in place), False on a lost race
        """
        updated = await ChallengeParticipant.filter(
            id=participant.id, version=participant.version
        ).update(
            current_progress=F("current_progress") + amount,
            last_updated=to_utc(now),
            version=participant.version + 1,
        )
        if updated != 1:
            return False

        participant.current_progress += amount
        participant.last_updated = to_utc(now)
        participant.version += 1
        return True
