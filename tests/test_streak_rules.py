"""Tests for the pure streak state machine."""

from datetime import date, timedelta

import pytest

from src.core.domain.streak_rules import (
    StreakSnapshot,
    StreakState,
    Transition,
    apply_activity,
    apply_daily_decay,
    award_freezes,
    classify,
    needs_reconciliation,
)

MON = date(2026, 3, 2)
TUE, WED, THU, FRI = (MON + timedelta(days=i) for i in range(1, 5))


def streak(**kwargs) -> StreakSnapshot:
    defaults = {
        "current_streak": 5,
        "longest_streak": 5,
        "last_activity_date": MON,
        "streak_start_date": MON - timedelta(days=4),
    }
    defaults.update(kwargs)
    return StreakSnapshot(**defaults)


# === apply_activity ===


def test_first_activity_starts_streak() -> None:
    result = apply_activity(None, MON)

    assert result.kind == Transition.STARTED
    assert result.snapshot == StreakSnapshot(
        current_streak=1,
        longest_streak=1,
        last_activity_date=MON,
        streak_start_date=MON,
        is_frozen=False,
        freezes_available=0,
    )


def test_first_activity_keeps_banked_freezes() -> None:
    banked = award_freezes(None, 2)

    result = apply_activity(banked, MON)

    assert result.kind == Transition.STARTED
    assert result.snapshot.current_streak == 1
    assert result.snapshot.freezes_available == 2


def test_next_day_increments() -> None:
    result = apply_activity(streak(), TUE)

    assert result.kind == Transition.INCREMENTED
    assert result.snapshot.current_streak == 6
    assert result.snapshot.longest_streak == 6
    assert result.snapshot.last_activity_date == TUE
    assert result.snapshot.streak_start_date == MON - timedelta(days=4)


def test_increment_keeps_higher_longest() -> None:
    result = apply_activity(streak(longest_streak=40), TUE)

    assert result.snapshot.current_streak == 6
    assert result.snapshot.longest_streak == 40


@pytest.mark.parametrize(
    "snapshot",
    [
        None,
        streak(),
        streak(is_frozen=True, last_activity_date=MON - timedelta(days=3)),
        streak(current_streak=0, freezes_available=2),
    ],
)
def test_same_day_logging_is_idempotent(snapshot) -> None:
    once = apply_activity(snapshot, WED).snapshot
    twice = apply_activity(once, WED)

    assert twice.kind == Transition.UNCHANGED
    assert twice.snapshot == once


def test_out_of_order_activity_does_not_regress() -> None:
    current = apply_activity(streak(), TUE).snapshot

    result = apply_activity(current, MON)

    assert result.kind == Transition.STALE
    assert result.snapshot == current
    assert not result.changed


def test_gap_with_banked_freeze_is_forgiven() -> None:
    result = apply_activity(streak(freezes_available=1), WED)

    assert result.kind == Transition.FORGIVEN
    assert result.freeze_consumed
    assert result.snapshot.freezes_available == 0
    assert result.snapshot.current_streak == 6
    assert result.snapshot.last_activity_date == WED
    assert result.snapshot.is_frozen is False


def test_gap_while_frozen_does_not_consume_again() -> None:
    result = apply_activity(streak(is_frozen=True, freezes_available=3), THU)

    assert result.kind == Transition.FORGIVEN
    assert not result.freeze_consumed
    assert result.snapshot.freezes_available == 3
    assert result.snapshot.is_frozen is False
    assert result.snapshot.current_streak == 6


def test_gap_without_protection_resets() -> None:
    result = apply_activity(streak(longest_streak=12), THU)

    assert result.kind == Transition.RESET
    assert result.snapshot.current_streak == 1
    assert result.snapshot.longest_streak == 12
    assert result.snapshot.streak_start_date == THU
    assert result.snapshot.last_activity_date == THU


def test_broken_streak_restarts_without_spending_freeze() -> None:
    result = apply_activity(streak(current_streak=0, freezes_available=2), THU)

    assert result.kind == Transition.RESET
    assert result.snapshot.current_streak == 1
    assert result.snapshot.freezes_available == 2


def test_week_scenario_with_freeze() -> None:
    """Mon=5, Tue -> 6, Tue again -> 6, skip Wed, Thu with a freeze -> 7."""
    state = streak(freezes_available=1)

    state = apply_activity(state, TUE).snapshot
    assert state.current_streak == 6

    state = apply_activity(state, TUE).snapshot
    assert state.current_streak == 6

    state = apply_activity(state, THU).snapshot
    assert state.current_streak == 7
    assert state.freezes_available == 0
    assert state.is_frozen is False


def test_week_scenario_without_freeze() -> None:
    """Tue=6, skip Wed and Thu, log Fri -> reset to 1, longest kept."""
    state = apply_activity(streak(), TUE).snapshot

    state = apply_activity(state, FRI).snapshot

    assert state.current_streak == 1
    assert state.longest_streak == 6


def test_longest_streak_is_monotonic_over_any_sequence() -> None:
    days = [MON, TUE, TUE, FRI, FRI + timedelta(days=1), MON + timedelta(days=10), TUE]
    state = None
    previous_longest = 0

    for activity_day in days:
        state = apply_activity(state, activity_day).snapshot
        assert state.longest_streak >= state.current_streak
        assert state.longest_streak >= previous_longest
        previous_longest = state.longest_streak


# === award_freezes ===


def test_award_freezes_creates_zero_length_streak() -> None:
    result = award_freezes(None, 2)

    assert result.freezes_available == 2
    assert result.current_streak == 0
    assert result.last_activity_date is None
    assert classify(result) == StreakState.NO_STREAK


def test_award_freezes_adds_to_bank() -> None:
    assert award_freezes(streak(freezes_available=1), 2).freezes_available == 3


@pytest.mark.parametrize("count", [0, -1])
def test_award_freezes_rejects_non_positive(count: int) -> None:
    with pytest.raises(ValueError):
        award_freezes(None, count)


# === daily decay ===


def test_sweep_ignores_streak_active_yesterday() -> None:
    # Thursday's sweep: last activity Wednesday
    assert not needs_reconciliation(streak(last_activity_date=WED), THU)


def test_sweep_freezes_when_freeze_banked() -> None:
    result = apply_daily_decay(streak(last_activity_date=TUE, freezes_available=2), THU)

    assert result.kind == Transition.FROZEN
    assert result.snapshot.is_frozen is True
    assert result.snapshot.freezes_available == 1
    assert result.snapshot.current_streak == 5
    assert classify(result.snapshot) == StreakState.FROZEN_HOLD


def test_sweep_breaks_streak_without_freeze() -> None:
    result = apply_daily_decay(streak(last_activity_date=TUE, longest_streak=9), THU)

    assert result.kind == Transition.DECAYED
    assert result.snapshot.current_streak == 0
    assert result.snapshot.longest_streak == 9
    assert classify(result.snapshot) == StreakState.BROKEN


def test_sweep_is_idempotent_once_frozen() -> None:
    frozen = apply_daily_decay(streak(last_activity_date=TUE, freezes_available=2), THU).snapshot

    again = apply_daily_decay(frozen, THU)
    next_day = apply_daily_decay(frozen, FRI)

    assert again.kind == Transition.UNCHANGED
    assert next_day.kind == Transition.UNCHANGED
    assert next_day.snapshot.freezes_available == 1


def test_sweep_then_activity_spends_exactly_one_freeze() -> None:
    """Sweep freezes on Thu, the catch-up on Thu does not spend another."""
    frozen = apply_daily_decay(streak(last_activity_date=TUE, freezes_available=1), THU).snapshot

    resumed = apply_activity(frozen, THU).snapshot

    assert resumed.freezes_available == 0
    assert resumed.is_frozen is False
    assert resumed.current_streak == 6


def test_classify_active() -> None:
    assert classify(streak()) == StreakState.ACTIVE
    assert classify(None) == StreakState.NO_STREAK
