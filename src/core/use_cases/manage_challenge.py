"""
Manage Challenge Use Cases - create and join challenges.

AICODE-NOTE: Membership is what makes a user visible to the progress ledger
and the lifecycle sweeps. The creator always auto-joins.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from src.database.models import Challenge, ChallengeParticipant, ExerciseType
from src.storage.challenge_repo import ChallengeRepository, ParticipantRepository

logger = logging.getLogger(__name__)


@dataclass
class CreateChallengeResult:
    success: bool
    challenge: Challenge | None = None
    error_message: str = ""


@dataclass
class JoinChallengeResult:
    success: bool
    participant: ChallengeParticipant | None = None
    error_message: str = ""


class CreateChallengeUseCase:
    def __init__(
        self,
        challenges: ChallengeRepository | None = None,
        participants: ParticipantRepository | None = None,
    ):
        self.challenges = challenges or ChallengeRepository()
        self.participants = participants or ParticipantRepository()

    async def execute(
        self,
        creator_id: int,
        name: str,
        exercise_type: ExerciseType,
        goal_amount: float,
        start_date: datetime,
        end_date: datetime,
        description: str | None = None,
        is_public: bool = False,
    ) -> CreateChallengeResult:
        """
        Create a challenge and add the creator as its first participant.

        Returns:
            CreateChallengeResult (error_message set on validation failure)
        """
        if len(name.strip()) < 3:
            return CreateChallengeResult(
                success=False, error_message="Name must be at least 3 characters"
            )
        if goal_amount < 1:
            return CreateChallengeResult(
                success=False, error_message="Goal must be at least 1"
            )
        if start_date >= end_date:
            return CreateChallengeResult(
                success=False, error_message="End date must be after start date"
            )

        async with in_transaction():
            challenge = await self.challenges.create(
                creator_id=creator_id,
                name=name.strip(),
                exercise_type=exercise_type,
                goal_amount=goal_amount,
                start_date=start_date,
                end_date=end_date,
                description=description,
                is_public=is_public,
            )
            await self.participants.create(challenge.id, creator_id)

        logger.info(f"Challenge {challenge.id} created by user {creator_id}")
        return CreateChallengeResult(success=True, challenge=challenge)


class JoinChallengeUseCase:
    def __init__(
        self,
        challenges: ChallengeRepository | None = None,
        participants: ParticipantRepository | None = None,
    ):
        self.challenges = challenges or ChallengeRepository()
        self.participants = participants or ParticipantRepository()

    async def execute(
        self, challenge_id: int, user_id: int, now: datetime
    ) -> JoinChallengeResult:
        challenge = await self.challenges.get(challenge_id)
        if challenge is None:
            return JoinChallengeResult(success=False, error_message="Challenge not found")

        if not await self.challenges.is_open(challenge_id, now):
            return JoinChallengeResult(
                success=False, error_message="This challenge has already ended"
            )

        if await self.participants.exists(challenge_id, user_id):
            return JoinChallengeResult(
                success=False, error_message="You have already joined this challenge"
            )

        try:
            participant = await self.participants.create(challenge_id, user_id)
        except IntegrityError:
            return JoinChallengeResult(
                success=False, error_message="You have already joined this challenge"
            )

        logger.info(f"User {user_id} joined challenge {challenge_id}")
        return JoinChallengeResult(success=True, participant=participant)
