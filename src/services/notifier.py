"""
Notifier Service - fire-and-forget notification emitter.

Contract:
- at-least-once: sweeps and event handlers may emit the same event again
- idempotent: the sink dedupes on NotificationEvent.dedupe_key
- best-effort: a failing sink is logged and dropped, emit() never raises,
  so a notification can never roll back the state change that caused it
"""

import logging
from typing import Protocol

from src.core.domain.notifications import NotificationEvent
from src.storage.notification_repo import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    async def save(self, event: NotificationEvent) -> bool: ...


class Notifier:
    def __init__(self, sink: NotificationSink | None = None):
        self.sink = sink or NotificationRepository()

    async def emit(self, event: NotificationEvent) -> bool:
        """
        Hand the event to the sink.

        Returns:
            True if the event is stored (now or by an earlier emit), False on failure
        """
        try:
            created = await self.sink.save(event)
        except Exception as e:
            logger.exception(
                f"Failed to emit {event.type.value} to user {event.user_id}: {e}"
            )
            return False

        if created:
            logger.info(f"Notification {event.type.value} emitted to user {event.user_id}")
        else:
            logger.debug(f"Notification {event.dedupe_key} already emitted, skipped")
        return True
