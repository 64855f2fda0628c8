"""
Streak Service - applies streak rules to stored records.

Each operation is read -> pure transition -> conditional write. When the
conditional write loses (a sweep or a parallel event touched the row),
the transition is recomputed against the fresh row.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from tortoise.exceptions import IntegrityError

from src.config import config
from src.core.domain.streak_rules import (
    StreakSnapshot,
    StreakState,
    apply_activity,
    award_freezes,
    classify,
)
from src.core.errors import StaleWriteError
from src.database.models import StreakRecord
from src.storage.streak_repo import StreakRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreakView:
    """Read-only projection of a streak for the UI."""

    user_id: int
    current_streak: int
    longest_streak: int
    last_activity_date: date | None
    streak_start_date: date | None
    is_frozen: bool
    freezes_available: int
    state: StreakState

    @classmethod
    def from_record(cls, record: StreakRecord) -> "StreakView":
        snapshot = StreakSnapshot.from_record(record)
        return cls(
            user_id=record.user_id,
            state=classify(snapshot),
            **snapshot.as_fields(),
        )


class StreakService:
    def __init__(
        self, repo: StreakRepository | None = None, max_attempts: int | None = None
    ):
        self.repo = repo or StreakRepository()
        self.max_attempts = max_attempts or config.STALE_WRITE_RETRIES

    async def get_streak(self, user_id: int) -> StreakView | None:
        record = await self.repo.get(user_id)
        if record is None:
            return None
        return StreakView.from_record(record)

    async def on_activity(
        self, user_id: int, activity_at: date | datetime
    ) -> StreakRecord:
        """
        Advance the user's streak for an activity.

        Args:
            user_id: User who logged the activity
            activity_at: When the activity happened (not when it arrived)

        Returns:
            The stored StreakRecord after the transition

        Raises:
            StaleWriteError: every attempt lost its conditional write
        """
        for _ in range(self.max_attempts):
            record = await self.repo.get(user_id)

            if record is None:
                transition = apply_activity(None, activity_at)
                try:
                    record = await self.repo.create(user_id, transition.snapshot)
                except IntegrityError:
                    logger.info(f"Streak for user {user_id} created concurrently, retrying")
                    continue
                logger.info(f"Streak started for user {user_id}")
                return record

            transition = apply_activity(StreakSnapshot.from_record(record), activity_at)
            if not transition.changed:
                return record

            if await self.repo.compare_and_set(record, transition.snapshot):
                logger.info(
                    f"Streak {transition.kind.value} for user {user_id}: "
                    f"{record.current_streak} days"
                    + (" (freeze used)" if transition.freeze_consumed else "")
                )
                return record

            logger.info(f"Stale streak write for user {user_id}, recomputing")

        raise StaleWriteError("StreakRecord", user_id, self.max_attempts)

    async def award_freeze(self, user_id: int, count: int) -> StreakRecord:
        """
        Bank streak freezes, creating a zero-length streak if needed.

        Raises:
            ValueError: count is not positive
            StaleWriteError: every attempt lost its conditional write
        """
        if count <= 0:
            raise ValueError(f"Freeze count must be positive, got {count}")

        for _ in range(self.max_attempts):
            record = await self.repo.get(user_id)

            if record is None:
                try:
                    record = await self.repo.create(user_id, award_freezes(None, count))
                except IntegrityError:
                    continue
            elif not await self.repo.compare_and_set(
                record, award_freezes(StreakSnapshot.from_record(record), count)
            ):
                continue

            logger.info(
                f"Awarded {count} freeze(s) to user {user_id}, "
                f"now {record.freezes_available}"
            )
            return record

        raise StaleWriteError("StreakRecord", user_id, self.max_attempts)
