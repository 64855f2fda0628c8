"""
Challenge Lifecycle Sweeps.

Three independent sweeps, each safe to rerun:
- notify_ending_soon: warn participants of challenges ending within the window
- finalize_completed: rank ended challenges, announce the winner once
- refresh_leaderboards: compute standings of running challenges (read-only)

AICODE-NOTE: Sweeps never touch ChallengeParticipant.current_progress, only
the Challenge latches (winners_announced, ending_soon_notified_at). The
latch is the point after which a challenge drops out of the sweep query,
so a crash mid-loop just means the challenge is processed again and the
notification dedupe keys absorb the repeats.
"""

import logging
from datetime import datetime

from src.config import config
from src.core.domain import notifications
from src.core.domain.challenge_rules import (
    LeaderboardEntry,
    build_leaderboard,
    ending_soon_window,
    rank_participants,
)
from src.database.models import Challenge
from src.services.notifier import Notifier
from src.storage.challenge_repo import ChallengeRepository, ParticipantRepository

logger = logging.getLogger(__name__)


async def notify_ending_soon(
    now: datetime,
    challenges: ChallengeRepository | None = None,
    participants: ParticipantRepository | None = None,
    notifier: Notifier | None = None,
    window_hours: int | None = None,
) -> dict[str, int]:
    """
    Send CHALLENGE_ENDING_SOON to participants of challenges ending soon.

    Returns:
        Stats: {"challenges": N, "sent": N, "failed": N}
    """
    challenges = challenges or ChallengeRepository()
    participants = participants or ParticipantRepository()
    notifier = notifier or Notifier()
    window_hours = window_hours or config.ENDING_SOON_WINDOW_HOURS
    window_start, window_end = ending_soon_window(now, window_hours)
    stats = {"challenges": 0, "sent": 0, "failed": 0}

    ending = await challenges.list_ending_between(window_start, window_end)
    logger.info(f"Found {len(ending)} challenges ending within the window")

    for challenge in ending:
        try:
            members = await participants.list_for_challenge(challenge.id)
            for member in members:
                event = notifications.ending_soon(member.user_id, challenge, window_hours)
                if await notifier.emit(event):
                    stats["sent"] += 1
            await challenges.mark_ending_soon_notified(challenge, now)
            stats["challenges"] += 1
        except Exception as e:
            logger.exception(
                f"Error sending ending-soon notices for challenge {challenge.id}: {e}"
            )
            stats["failed"] += 1

    return stats


async def finalize_completed(
    now: datetime,
    challenges: ChallengeRepository | None = None,
    participants: ParticipantRepository | None = None,
    notifier: Notifier | None = None,
) -> dict[str, int]:
    """
    Announce winners of challenges that ended and were not announced yet.

    Returns:
        Stats: {"finalized": N, "failed": N}
    """
    challenges = challenges or ChallengeRepository()
    participants = participants or ParticipantRepository()
    notifier = notifier or Notifier()
    stats = {"finalized": 0, "failed": 0}

    ended = await challenges.list_unannounced_ended(now)
    logger.info(f"Processing {len(ended)} completed challenges")

    for challenge in ended:
        try:
            await _finalize_one(challenge, challenges, participants, notifier)
            stats["finalized"] += 1
        except Exception as e:
            logger.exception(f"Error processing completion for challenge {challenge.id}: {e}")
            stats["failed"] += 1

    return stats


async def _finalize_one(
    challenge: Challenge,
    challenges: ChallengeRepository,
    participants: ParticipantRepository,
    notifier: Notifier,
) -> None:
    ranked = rank_participants(await participants.list_for_challenge(challenge.id))

    if ranked:
        winner = ranked[0]
        winner_name = winner.user.display_name

        await notifier.emit(
            notifications.challenge_won(winner.user_id, challenge, winner.current_progress)
        )
        for member in ranked[1:]:
            await notifier.emit(
                notifications.challenge_completed(
                    member.user_id, challenge, winner_name, winner.current_progress
                )
            )

        if all(member.user_id != challenge.creator_id for member in ranked):
            await notifier.emit(
                notifications.challenge_completed(
                    challenge.creator_id,
                    challenge,
                    winner_name,
                    winner.current_progress,
                    is_creator=True,
                )
            )
        logger.info(
            f"Challenge {challenge.id} won by user {winner.user_id} "
            f"with {winner.current_progress}"
        )
    else:
        logger.info(f"Challenge {challenge.id} ended without participants")

    await challenges.mark_winners_announced(challenge)


async def refresh_leaderboards(
    now: datetime,
    challenges: ChallengeRepository | None = None,
    participants: ParticipantRepository | None = None,
) -> dict[int, list[LeaderboardEntry]]:
    """Compute and log standings of running challenges. Writes nothing."""
    challenges = challenges or ChallengeRepository()
    participants = participants or ParticipantRepository()
    boards: dict[int, list[LeaderboardEntry]] = {}

    active = await challenges.list_active(now)
    logger.info(f"Updating leaderboards for {len(active)} active challenges")

    for challenge in active:
        try:
            board = build_leaderboard(await participants.list_for_challenge(challenge.id))
        except Exception as e:
            logger.exception(f"Error updating leaderboard for challenge {challenge.id}: {e}")
            continue

        boards[challenge.id] = board
        leader = f"user {board[0].user_id} at {board[0].progress}" if board else "nobody"
        logger.info(
            f"Challenge {challenge.name}: {len(board)} participants, leader {leader}"
        )

    return boards


async def get_leaderboard(
    challenge_id: int, participants: ParticipantRepository | None = None
) -> list[LeaderboardEntry]:
    participants = participants or ParticipantRepository()
    return build_leaderboard(await participants.list_for_challenge(challenge_id))
