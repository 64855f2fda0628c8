"""
Log Exercise Use Case - entry point for the "exercise logged" event.

AICODE-NOTE: Called by the ingestion write path AFTER the exercise row is
durably stored. Streak failures propagate so the caller can retry the
whole event (the streak rules are idempotent per day). Ledger failures are
contained per participation inside ProgressLedger.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from src.database.models import ExerciseType
from src.services.progress_ledger import ProgressLedger, ProgressUpdate
from src.services.streaks import StreakService, StreakView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExerciseLogged:
    """Event emitted by the exercise write path."""

    user_id: int
    type: ExerciseType
    amount: float
    logged_at: datetime
    unit: str = "reps"


@dataclass
class ExerciseLoggedResult:
    """Outcome of processing one logged exercise."""

    streak: StreakView
    progress_updates: list[ProgressUpdate] = field(default_factory=list)

    @property
    def goals_reached(self) -> list[int]:
        return [u.challenge_id for u in self.progress_updates if u.goal_reached]


class LogExerciseUseCase:
    def __init__(
        self,
        streaks: StreakService | None = None,
        ledger: ProgressLedger | None = None,
    ):
        self.streaks = streaks or StreakService()
        self.ledger = ledger or ProgressLedger()

    async def execute(self, event: ExerciseLogged) -> ExerciseLoggedResult:
        """
        Apply a logged exercise to the streak and the challenge ledger.

        Args:
            event: The logged exercise

        Returns:
            ExerciseLoggedResult with the new streak and progress updates
        """
        record = await self.streaks.on_activity(event.user_id, event.logged_at)

        updates = await self.ledger.apply_exercise(
            event.user_id, event.type, event.amount, event.logged_at
        )

        logger.info(
            f"Exercise {event.type.value} x{event.amount} {event.unit} by user "
            f"{event.user_id}: streak {record.current_streak}, "
            f"{len(updates)} challenge(s) updated"
        )

        return ExerciseLoggedResult(
            streak=StreakView.from_record(record), progress_updates=updates
        )
