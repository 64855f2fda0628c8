"""
Notification Rules - which event to emit and with what content.

AICODE-NOTE: Only decides WHEN and WHAT. Persisting/delivering the row is
done by src/services/notifier.py.

The dedupe key makes each event idempotent per (type, user, challenge or day).
"""

from dataclasses import dataclass
from datetime import date

from src.core.domain.challenge_rules import format_amount
from src.database.models import Challenge, NotificationType

# Streak lengths that get an extra "at risk" warning
MILESTONE_STREAKS = frozenset({7, 14, 21, 30, 100, 365})


@dataclass(frozen=True)
class NotificationEvent:
    user_id: int
    type: NotificationType
    title: str
    content: str
    dedupe_key: str


def _key(type_: NotificationType, user_id: int, scope: str) -> str:
    return f"{type_.value}:{user_id}:{scope}"


def _exercise_label(challenge: Challenge) -> str:
    return challenge.type.value.lower().replace("_", "-")


def goal_reached(user_id: int, challenge: Challenge) -> NotificationEvent:
    type_ = NotificationType.CHALLENGE_GOAL_REACHED
    return NotificationEvent(
        user_id=user_id,
        type=type_,
        title="Challenge Goal Reached!",
        content=(
            f'You\'ve reached your goal in the "{challenge.name}" challenge! '
            "Keep going to secure your position!"
        ),
        dedupe_key=_key(type_, user_id, f"challenge-{challenge.id}"),
    )


def ending_soon(
    user_id: int, challenge: Challenge, window_hours: int = 24
) -> NotificationEvent:
    type_ = NotificationType.CHALLENGE_ENDING_SOON
    return NotificationEvent(
        user_id=user_id,
        type=type_,
        title="Challenge Ending Soon",
        content=(
            f'The "{challenge.name}" challenge is ending in less than '
            f"{window_hours} hours. "
            "Make your final push!"
        ),
        dedupe_key=_key(type_, user_id, f"challenge-{challenge.id}"),
    )


def challenge_won(
    user_id: int, challenge: Challenge, progress: float
) -> NotificationEvent:
    type_ = NotificationType.CHALLENGE_WON
    return NotificationEvent(
        user_id=user_id,
        type=type_,
        title="You Won a Challenge!",
        content=(
            f'Congratulations! You won the "{challenge.name}" challenge '
            f"with {format_amount(progress)} {_exercise_label(challenge)}!"
        ),
        dedupe_key=_key(type_, user_id, f"challenge-{challenge.id}"),
    )


def challenge_completed(
    user_id: int,
    challenge: Challenge,
    winner_name: str,
    winner_progress: float,
    is_creator: bool = False,
) -> NotificationEvent:
    type_ = NotificationType.CHALLENGE_COMPLETED
    result = (
        f"{winner_name} won with {format_amount(winner_progress)} "
        f"{_exercise_label(challenge)}!"
    )
    if is_creator:
        title = "Your Challenge Completed"
        content = f'Your challenge "{challenge.name}" has ended. {result}'
    else:
        title = "Challenge Completed"
        content = f'The "{challenge.name}" challenge has ended. {result}'
    return NotificationEvent(
        user_id=user_id,
        type=type_,
        title=title,
        content=content,
        dedupe_key=_key(type_, user_id, f"challenge-{challenge.id}"),
    )


def streak_reminder(user_id: int, streak: int, today: date) -> NotificationEvent:
    type_ = NotificationType.STREAK_REMINDER
    return NotificationEvent(
        user_id=user_id,
        type=type_,
        title="Maintain Your Streak!",
        content=(
            "Don't forget to log an activity today to maintain your "
            f"{streak} day streak!"
        ),
        dedupe_key=_key(type_, user_id, today.isoformat()),
    )


def milestone_at_risk(user_id: int, streak: int, today: date) -> NotificationEvent:
    type_ = NotificationType.STREAK_MILESTONE_AT_RISK
    return NotificationEvent(
        user_id=user_id,
        type=type_,
        title="Milestone Streak at Risk!",
        content=(
            f"Your {streak} day streak milestone is at risk! "
            "Log an activity today to maintain it!"
        ),
        dedupe_key=_key(type_, user_id, today.isoformat()),
    )


def is_milestone(streak: int) -> bool:
    return streak in MILESTONE_STREAKS
