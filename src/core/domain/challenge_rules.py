"""
Challenge Domain Rules - progress, goal crossing and ranking.

AICODE-NOTE: Pure functions WITHOUT DB access. Participants are passed in
already loaded; the rules never mutate them.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from src.database.models import ChallengeParticipant


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    participant_id: int
    user_id: int
    progress: float


def crossed_goal(previous: float, current: float, goal: float) -> bool:
    """
    True only on the update that moves progress over the goal.

    Strict `previous < goal` makes a replayed or later update silent.
    """
    return previous < goal <= current


def ending_soon_window(now: datetime, hours: int) -> tuple[datetime, datetime]:
    return now, now + timedelta(hours=hours)


def _tie_break_key(participant: ChallengeParticipant) -> tuple:
    # Earliest to reach the score wins; never-updated rows go last
    last_updated = participant.last_updated
    joined_at = participant.joined_at
    return (
        -participant.current_progress,
        last_updated is None,
        last_updated.timestamp() if last_updated else 0.0,
        joined_at.timestamp() if joined_at else 0.0,
        participant.id,
    )


def rank_participants(
    participants: list[ChallengeParticipant],
) -> list[ChallengeParticipant]:
    """
    Order participants for standings.

    Progress descending; ties broken by earliest last_updated, then
    earliest joined_at, then lowest id. Total and deterministic.
    """
    return sorted(participants, key=_tie_break_key)


def build_leaderboard(
    participants: list[ChallengeParticipant],
) -> list[LeaderboardEntry]:
    return [
        LeaderboardEntry(
            rank=position,
            participant_id=p.id,
            user_id=p.user_id,
            progress=p.current_progress,
        )
        for position, p in enumerate(rank_participants(participants), start=1)
    ]


def format_amount(amount: float) -> str:
    """120.0 -> '120', 2.5 -> '2.5'."""
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:g}"
