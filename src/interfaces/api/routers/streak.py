"""
Streak API router.

Endpoints:
- GET /api/streaks/{user_id} - Get streak projection
- POST /api/streaks/{user_id}/freezes - Award streak freezes
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.interfaces.api.schemas import AwardFreezeRequest, StreakResponse
from src.services.streaks import StreakService, StreakView

router = APIRouter(prefix="/api/streaks", tags=["streaks"])


def get_streak_service() -> StreakService:
    return StreakService()


@router.get("/{user_id}", response_model=StreakResponse)
async def get_streak(
    user_id: int, service: StreakService = Depends(get_streak_service)
) -> StreakResponse:
    """Get the user's streak. 404 if the user never logged activity or freezes."""
    view = await service.get_streak(user_id)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Streak not found",
        )
    return StreakResponse.model_validate(view)


@router.post("/{user_id}/freezes", response_model=StreakResponse)
async def award_freeze(
    user_id: int,
    body: AwardFreezeRequest,
    service: StreakService = Depends(get_streak_service),
) -> StreakResponse:
    """Bank streak freezes (creates the streak record if needed)."""
    record = await service.award_freeze(user_id, body.count)
    return StreakResponse.model_validate(StreakView.from_record(record))
