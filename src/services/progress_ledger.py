"""
Progress Ledger - adds logged exercise to matching challenge participations.

AICODE-NOTE: Each participation is an independent unit of work. A failure on
one is logged and the rest are still updated. The goal-crossing check uses
the progress value the conditional write actually replaced, so a replayed
update can never fire CHALLENGE_GOAL_REACHED twice.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from src.config import config
from src.core.domain import notifications
from src.core.domain.challenge_rules import crossed_goal
from src.core.errors import StaleWriteError
from src.database.models import ChallengeParticipant, ExerciseType
from src.services.notifier import Notifier
from src.storage.challenge_repo import ParticipantRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressUpdate:
    challenge_id: int
    participant_id: int
    previous: float
    current: float
    goal_reached: bool


class ProgressLedger:
    def __init__(
        self,
        participants: ParticipantRepository | None = None,
        notifier: Notifier | None = None,
        max_attempts: int | None = None,
    ):
        self.participants = participants or ParticipantRepository()
        self.notifier = notifier or Notifier()
        self.max_attempts = max_attempts or config.STALE_WRITE_RETRIES

    async def apply_exercise(
        self,
        user_id: int,
        exercise_type: ExerciseType,
        amount: float,
        now: datetime,
    ) -> list[ProgressUpdate]:
        """
        Credit `amount` to every running challenge of `exercise_type`.

        Returns:
            Successful updates (empty if the user has no matching challenge)
        """
        if amount <= 0:
            return []

        participations = await self.participants.list_active_for_user(
            user_id, exercise_type, now
        )
        if not participations:
            return []

        logger.info(
            f"Updating progress for user {user_id} in {len(participations)} challenges"
        )

        updates: list[ProgressUpdate] = []
        for participation in participations:
            try:
                update = await self._credit(participation, amount, now)
            except Exception as e:
                logger.exception(
                    f"Error updating progress for user {user_id} "
                    f"in challenge {participation.challenge_id}: {e}"
                )
                continue

            updates.append(update)
            logger.info(
                f"Progress for user {user_id} in challenge {update.challenge_id}: "
                f"{update.previous} -> {update.current}"
            )

            if update.goal_reached:
                await self.notifier.emit(
                    notifications.goal_reached(user_id, participation.challenge)
                )

        return updates

    async def _credit(
        self, participation: ChallengeParticipant, amount: float, now: datetime
    ) -> ProgressUpdate:
        for _ in range(self.max_attempts):
            previous = participation.current_progress
            if await self.participants.add_progress(participation, amount, now):
                goal = participation.challenge.goal_amount
                return ProgressUpdate(
                    challenge_id=participation.challenge_id,
                    participant_id=participation.id,
                    previous=previous,
                    current=participation.current_progress,
                    goal_reached=crossed_goal(
                        previous, participation.current_progress, goal
                    ),
                )

            fresh = await self.participants.get(participation.id)
            if fresh is None:
                raise LookupError(f"Participant {participation.id} no longer exists")
            participation = fresh

        raise StaleWriteError("ChallengeParticipant", participation.id, self.max_attempts)
