"""
Streak Repository - CRUD and conditional updates for StreakRecord.

AICODE-NOTE: Only data access, NO business logic. The streak rules live in
src/core/domain/streak_rules.py. Every write goes through compare_and_set()
so concurrent activity/sweep updates never overwrite each other.
"""

from datetime import date, datetime, timezone

from src.core.domain.streak_rules import StreakSnapshot
from src.database.models import StreakRecord, User


class StreakRepository:
    """Tortoise-backed store of StreakRecord rows."""

    async def get(self, user_id: int) -> StreakRecord | None:
        """Get streak by user ID."""
        return await StreakRecord.get_or_none(user_id=user_id)

    async def create(self, user_id: int, snapshot: StreakSnapshot) -> StreakRecord:
        """
        Create the streak (and the user row if it is unknown yet).

        Raises tortoise IntegrityError if another writer created it first.
        """
        await User.get_or_create(id=user_id)
        return await StreakRecord.create(user_id=user_id, **snapshot.as_fields())

    async def compare_and_set(
        self, record: StreakRecord, snapshot: StreakSnapshot
    ) -> bool:
        """
        Write `snapshot` only if the row still has `record.version`.

        Returns:
            True if the write won (record is updated in place), False on a lost race
        """
        fields = snapshot.as_fields()
        updated_at = datetime.now(timezone.utc)
        updated = await StreakRecord.filter(
            id=record.id, version=record.version
        ).update(**fields, version=record.version + 1, updated_at=updated_at)
        if updated != 1:
            return False

        for name, value in fields.items():
            setattr(record, name, value)
        record.version += 1
        record.updated_at = updated_at
        return True

    async def list_needing_reconciliation(self, before: date) -> list[StreakRecord]:
        """Unprotected, non-zero streaks whose last activity is before `before`."""
        return (
            await StreakRecord.filter(
                last_activity_date__lt=before,
                is_frozen=False,
                current_streak__gt=0,
            )
            .order_by("id")
            .all()
        )

    async def list_at_risk(self, today: date) -> list[StreakRecord]:
        """Live streaks with no activity logged today yet."""
        return (
            await StreakRecord.filter(current_streak__gt=0, last_activity_date__lt=today)
            .order_by("id")
            .all()
        )
