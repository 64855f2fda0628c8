"""
Notification Repository - write-once storage of emitted notifications.

AICODE-NOTE: dedupe_key is unique. A duplicate insert is reported as
"already stored", not as an error, which makes emission idempotent.
"""

from tortoise.exceptions import IntegrityError

from src.core.domain.notifications import NotificationEvent
from src.database.models import Notification, User


class NotificationRepository:
    """Default notification sink: one row per event."""

    async def save(self, event: NotificationEvent) -> bool:
        """
        Store the notification.

        Returns:
            True if a new row was written, False if the event was already stored
        """
        if await Notification.filter(dedupe_key=event.dedupe_key).exists():
            return False

        await User.get_or_create(id=event.user_id)
        try:
            await Notification.create(
                user_id=event.user_id,
                type=event.type,
                title=event.title,
                content=event.content,
                dedupe_key=event.dedupe_key,
            )
        except IntegrityError:
            # Concurrent emitter stored it between the check and the insert
            return False
        return True

    async def list_for_user(self, user_id: int) -> list[Notification]:
        return await Notification.filter(user_id=user_id).order_by("id").all()
