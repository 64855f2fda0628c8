"""
Streak Domain Rules - pure streak state machine.

AICODE-NOTE: Pure functions WITHOUT DB access and WITHOUT side-effects.
Services read a StreakSnapshot, call these rules and write the result back
with a conditional update. On a lost race the rules are simply recomputed
against the fresh row, so they must stay deterministic.

Transition table for a logged activity (apply_activity):
- no record / no activity yet  -> STARTED     current=1
- activity day < last day      -> STALE       unchanged (out-of-order event)
- same day                     -> UNCHANGED   unchanged
- day after last day           -> INCREMENTED current+1
- gap, frozen or freeze banked -> FORGIVEN    current+1, freeze consumed if not frozen
- gap, no protection           -> RESET       current=1, longest kept
  (a broken streak has nothing to protect, so it resets without a freeze)

Daily sweep (apply_daily_decay), for a missed full day:
- freeze banked                -> FROZEN      freeze consumed, is_frozen=True
- no freeze                    -> DECAYED     current=0
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum

from src.core.domain.calendar import DayLike, days_between, to_day, yesterday


class StreakState(str, Enum):
    NO_STREAK = "no_streak"
    ACTIVE = "active"
    FROZEN_HOLD = "frozen_hold"
    BROKEN = "broken"


class Transition(str, Enum):
    STARTED = "started"
    UNCHANGED = "unchanged"
    STALE = "stale"
    INCREMENTED = "incremented"
    FORGIVEN = "forgiven"
    RESET = "reset"
    FROZEN = "frozen"
    DECAYED = "decayed"


@dataclass(frozen=True)
class StreakSnapshot:
    """Value copy of the mutable part of a StreakRecord."""

    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: date | None = None
    streak_start_date: date | None = None
    is_frozen: bool = False
    freezes_available: int = 0

    @classmethod
    def from_record(cls, record) -> "StreakSnapshot":
        return cls(
            current_streak=record.current_streak,
            longest_streak=record.longest_streak,
            last_activity_date=record.last_activity_date,
            streak_start_date=record.streak_start_date,
            is_frozen=record.is_frozen,
            freezes_available=record.freezes_available,
        )

    def as_fields(self) -> dict:
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_activity_date": self.last_activity_date,
            "streak_start_date": self.streak_start_date,
            "is_frozen": self.is_frozen,
            "freezes_available": self.freezes_available,
        }


@dataclass(frozen=True)
class StreakTransition:
    """Result of applying one event to a snapshot."""

    kind: Transition
    snapshot: StreakSnapshot
    freeze_consumed: bool = False

    @property
    def changed(self) -> bool:
        return self.kind not in (Transition.UNCHANGED, Transition.STALE)


def classify(snapshot: StreakSnapshot | None) -> StreakState:
    """Derive the tagged state from the stored counters."""
    if snapshot is None or snapshot.last_activity_date is None:
        return StreakState.NO_STREAK
    if snapshot.is_frozen:
        return StreakState.FROZEN_HOLD
    if snapshot.current_streak >= 1:
        return StreakState.ACTIVE
    return StreakState.BROKEN


def apply_activity(
    snapshot: StreakSnapshot | None, activity_date: DayLike
) -> StreakTransition:
    """
    Compute the streak after a logged activity.

    Args:
        snapshot: Current streak (None if the user has no record yet)
        activity_date: Date or datetime of the activity

    Returns:
        StreakTransition with the new snapshot and the rule that fired
    """
    day = to_day(activity_date)

    if snapshot is None or snapshot.last_activity_date is None:
        base = snapshot or StreakSnapshot()
        return StreakTransition(
            Transition.STARTED,
            replace(
                base,
                current_streak=1,
                longest_streak=max(base.longest_streak, 1),
                last_activity_date=day,
                streak_start_date=day,
                is_frozen=False,
            ),
        )

    gap = days_between(snapshot.last_activity_date, day)

    if gap < 0:
        return StreakTransition(Transition.STALE, snapshot)

    if gap == 0:
        return StreakTransition(Transition.UNCHANGED, snapshot)

    if gap == 1:
        return StreakTransition(Transition.INCREMENTED, _continue(snapshot, day))

    if snapshot.current_streak > 0 and (
        snapshot.is_frozen or snapshot.freezes_available > 0
    ):
        # Freeze was already taken by the sweep when is_frozen is set
        consume = not snapshot.is_frozen
        continued = _continue(snapshot, day)
        if consume:
            continued = replace(
                continued, freezes_available=snapshot.freezes_available - 1
            )
        return StreakTransition(Transition.FORGIVEN, continued, freeze_consumed=consume)

    return StreakTransition(
        Transition.RESET,
        replace(
            snapshot,
            current_streak=1,
            longest_streak=max(snapshot.longest_streak, 1),
            last_activity_date=day,
            streak_start_date=day,
            is_frozen=False,
        ),
    )


def _continue(snapshot: StreakSnapshot, day: date) -> StreakSnapshot:
    current = snapshot.current_streak + 1
    start = snapshot.streak_start_date
    if snapshot.current_streak == 0 or start is None:
        start = day
    return replace(
        snapshot,
        current_streak=current,
        longest_streak=max(snapshot.longest_streak, current),
        last_activity_date=day,
        streak_start_date=start,
        is_frozen=False,
    )


def award_freezes(snapshot: StreakSnapshot | None, count: int) -> StreakSnapshot:
    """Bank `count` freezes. A missing record becomes a zero-length streak."""
    if count <= 0:
        raise ValueError(f"Freeze count must be positive, got {count}")
    base = snapshot or StreakSnapshot()
    return replace(base, freezes_available=base.freezes_available + count)


def needs_reconciliation(snapshot: StreakSnapshot, now: DayLike) -> bool:
    """
    Whether the daily sweep must act on this streak.

    A full day was missed (last activity strictly before yesterday),
    nothing protects it yet, and there is a streak left to protect.
    """
    if snapshot.last_activity_date is None or snapshot.is_frozen:
        return False
    if snapshot.current_streak <= 0:
        return False
    return snapshot.last_activity_date < yesterday(now)


def apply_daily_decay(snapshot: StreakSnapshot, now: DayLike) -> StreakTransition:
    """Sweep rule: spend a banked freeze or break the streak."""
    if not needs_reconciliation(snapshot, now):
        return StreakTransition(Transition.UNCHANGED, snapshot)

    if snapshot.freezes_available > 0:
        return StreakTransition(
            Transition.FROZEN,
            replace(
                snapshot,
                freezes_available=snapshot.freezes_available - 1,
                is_frozen=True,
            ),
            freeze_consumed=True,
        )

    return StreakTransition(
        Transition.DECAYED, replace(snapshot, current_streak=0, is_frozen=False)
    )
