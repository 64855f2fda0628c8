"""
Exercise API router.

Endpoints:
- POST /api/exercises - Apply a logged exercise to streak and challenges
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.core.errors import StaleWriteError
from src.core.use_cases.log_exercise import ExerciseLogged, LogExerciseUseCase
from src.interfaces.api.schemas import (
    ExerciseLoggedRequest,
    ExerciseLoggedResponse,
    ProgressUpdateResponse,
    StreakResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["exercises"])


def get_log_exercise_use_case() -> LogExerciseUseCase:
    return LogExerciseUseCase()


@router.post("/exercises", response_model=ExerciseLoggedResponse)
async def exercise_logged(
    body: ExerciseLoggedRequest,
    use_case: LogExerciseUseCase = Depends(get_log_exercise_use_case),
) -> ExerciseLoggedResponse:
    """
    Called by the exercise write path after the exercise is stored.

    409 means the exercise is saved but progress is pending: retry the call.
    """
    try:
        result = await use_case.execute(
            ExerciseLogged(
                user_id=body.user_id,
                type=body.type,
                amount=body.amount,
                unit=body.unit,
                logged_at=body.logged_at,
            )
        )
    except StaleWriteError as e:
        logger.warning(f"Progress pending for user {body.user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Activity saved, progress pending",
        ) from e

    return ExerciseLoggedResponse(
        streak=StreakResponse.model_validate(result.streak),
        progress_updates=[
            ProgressUpdateResponse.model_validate(u) for u in result.progress_updates
        ],
    )
