"""
Challenge API router.

Endpoints:
- GET /api/challenges/{challenge_id}/leaderboard - Current standings
"""

from fastapi import APIRouter, HTTPException, status

from src.interfaces.api.schemas import LeaderboardEntryResponse, LeaderboardResponse
from src.services.challenge_lifecycle import get_leaderboard
from src.storage.challenge_repo import ChallengeRepository

router = APIRouter(prefix="/api/challenges", tags=["challenges"])


@router.get("/{challenge_id}/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(challenge_id: int) -> LeaderboardResponse:
    if await ChallengeRepository().get(challenge_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Challenge not found",
        )

    entries = await get_leaderboard(challenge_id)
    return LeaderboardResponse(
        challenge_id=challenge_id,
        entries=[LeaderboardEntryResponse.model_validate(e) for e in entries],
    )
