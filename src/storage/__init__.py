"""Storage layer - dumb repositories without business logic."""

from .challenge_repo import ChallengeRepository, ParticipantRepository
from .notification_repo import NotificationRepository
from .streak_repo import StreakRepository

__all__ = [
    "ChallengeRepository",
    "NotificationRepository",
    "ParticipantRepository",
    "StreakRepository",
]
