"""
Database models for the FitStreak engine.

Structure:
- User: participant (only the display name matters here)
- StreakRecord: per-user streak counters and freeze bank
- Challenge: time-boxed goal over a single exercise type
- ChallengeParticipant: per-(challenge, user) progress ledger row
- Notification: emitted notification event (delivery is external)
"""

from enum import Enum

from tortoise import fields, models


class ExerciseType(str, Enum):
    PUSH_UPS = "PUSH_UPS"
    RUNNING = "RUNNING"
    SIT_UPS = "SIT_UPS"


class NotificationType(str, Enum):
    STREAK_REMINDER = "STREAK_REMINDER"
    STREAK_MILESTONE_AT_RISK = "STREAK_MILESTONE_AT_RISK"
    CHALLENGE_GOAL_REACHED = "CHALLENGE_GOAL_REACHED"
    CHALLENGE_ENDING_SOON = "CHALLENGE_ENDING_SOON"
    CHALLENGE_WON = "CHALLENGE_WON"
    CHALLENGE_COMPLETED = "CHALLENGE_COMPLETED"


class User(models.Model):
    """App user."""

    id = fields.IntField(primary_key=True)
    username = fields.CharField(max_length=255, null=True)
    name = fields.CharField(max_length=255, null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    streak: fields.BackwardOneToOneRelation["StreakRecord"]
    participations: fields.ReverseRelation["ChallengeParticipant"]

    class Meta:
        table = "users"

    @property
    def display_name(self) -> str:
        return self.name or self.username or "A user"


class StreakRecord(models.Model):
    """
    Streak of one user.

    AICODE-NOTE: `version` is bumped on every write. Repositories update
    with `filter(id=..., version=...)` so a lost race is detected by the
    affected row count instead of silently overwriting.
    """

    id = fields.IntField(primary_key=True)
    user: fields.OneToOneRelation[User] = fields.OneToOneField(
        "models.User", related_name="streak", on_delete=fields.CASCADE
    )
    user_id: int

    current_streak = fields.IntField(default=0)
    longest_streak = fields.IntField(default=0)

    # Null only when freezes were banked before the first activity
    last_activity_date = fields.DateField(null=True, db_index=True)
    streak_start_date = fields.DateField(null=True)

    is_frozen = fields.BooleanField(default=False)
    freezes_available = fields.IntField(default=0)

    version = fields.IntField(default=0)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "streaks"


class Challenge(models.Model):
    """Time-boxed competition over one exercise type."""

    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=255)
    description = fields.TextField(null=True)

    type = fields.CharEnumField(ExerciseType, max_length=20)
    goal_amount = fields.FloatField()

    start_date = fields.DatetimeField(db_index=True)
    end_date = fields.DatetimeField(db_index=True)
    is_public = fields.BooleanField(default=False)

    creator: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="created_challenges", on_delete=fields.CASCADE
    )
    creator_id: int

    # One-shot latches for the lifecycle sweeps
    winners_announced = fields.BooleanField(default=False)
    ending_soon_notified_at = fields.DatetimeField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    participants: fields.ReverseRelation["ChallengeParticipant"]

    class Meta:
        table = "challenges"


class ChallengeParticipant(models.Model):
    """Progress ledger row of one user in one challenge."""

    id = fields.IntField(primary_key=True)
    challenge: fields.ForeignKeyRelation[Challenge] = fields.ForeignKeyField(
        "models.Challenge", related_name="participants", on_delete=fields.CASCADE
    )
    challenge_id: int
    user: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="participations", on_delete=fields.CASCADE
    )
    user_id: int

    current_progress = fields.FloatField(default=0)
    joined_at = fields.DatetimeField(auto_now_add=True)
    last_updated = fields.DatetimeField(null=True)

    version = fields.IntField(default=0)

    class Meta:
        table = "challenge_participants"
        unique_together = (("challenge", "user"),)


class Notification(models.Model):
    """
    Emitted notification.

    AICODE-NOTE: dedupe_key is unique, so re-emitting the same event
    (sweep rerun, event replay) never produces a second row.
    """

    id = fields.IntField(primary_key=True)
    user: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="notifications", on_delete=fields.CASCADE
    )
    user_id: int

    type = fields.CharEnumField(NotificationType, max_length=40)
    title = fields.CharField(max_length=255)
    content = fields.TextField()
    is_read = fields.BooleanField(default=False)

    dedupe_key = fields.CharField(max_length=255, unique=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "notifications"
