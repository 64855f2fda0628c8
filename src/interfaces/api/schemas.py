"""
Pydantic schemas for API requests and responses.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from src.core.domain.streak_rules import StreakState
from src.database.models import ExerciseType

# ============ Streak Schemas ============


class StreakResponse(BaseModel):
    """Read-only streak projection."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    current_streak: int
    longest_streak: int
    last_activity_date: date | None = None
    streak_start_date: date | None = None
    is_frozen: bool
    freezes_available: int
    state: StreakState


class AwardFreezeRequest(BaseModel):
    count: int = Field(gt=0)


# ============ Exercise Schemas ============


class ExerciseLoggedRequest(BaseModel):
    user_id: int
    type: ExerciseType
    amount: float = Field(gt=0)
    unit: str = "reps"
    logged_at: datetime


class ProgressUpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    challenge_id: int
    previous: float
    current: float
    goal_reached: bool


class ExerciseLoggedResponse(BaseModel):
    streak: StreakResponse
    progress_updates: list[ProgressUpdateResponse]


# ============ Challenge Schemas ============


class LeaderboardEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rank: int
    user_id: int
    progress: float


class LeaderboardResponse(BaseModel):
    challenge_id: int
    entries: list[LeaderboardEntryResponse]
