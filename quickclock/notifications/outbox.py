"""Per-unit-of-work notification outbox.

Services record notification events here while they mutate state. The
events are written to the notifications table only after the primary
transaction has committed, each delivery in its own session. A failed
delivery is logged and dropped; it never affects the committed change.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Callable, Optional

from quickclock.common.constants import NotificationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationEvent:
    title: str
    message: str
    type: NotificationType
    reference_id: Optional[uuid.UUID] = None
    # Either a single recipient or every admin
    user_id: Optional[uuid.UUID] = None
    to_admins: bool = False


class NotificationOutbox:
    """Collects notification events and dispatches them after commit."""

    def __init__(self, session_factory: Optional[Callable] = None) -> None:
        self._session_factory = session_factory
        self._events: list[NotificationEvent] = []

    @property
    def pending(self) -> list[NotificationEvent]:
        return list(self._events)

    def notify(
        self,
        user_id: uuid.UUID,
        title: str,
        message: str,
        type: NotificationType = NotificationType.system,
        reference_id: Optional[uuid.UUID] = None,
    ) -> None:
        self._events.append(
            NotificationEvent(
                title=title,
                message=message,
                type=type,
                reference_id=reference_id,
                user_id=user_id,
            )
        )

    def notify_admins(
        self,
        title: str,
        message: str,
        type: NotificationType = NotificationType.system,
        reference_id: Optional[uuid.UUID] = None,
    ) -> None:
        self._events.append(
            NotificationEvent(
                title=title,
                message=message,
                type=type,
                reference_id=reference_id,
                to_admins=True,
            )
        )

    def clear(self) -> None:
        self._events.clear()

    async def flush(self) -> int:
        """Deliver and drain pending events. Returns the number of rows written."""
        events, self._events = self._events, []
        if not events:
            return 0

        from quickclock.notifications.service import NotificationService
        from quickclock.users.service import UserService

        factory = self._session_factory
        if factory is None:
            from quickclock.database import async_session_factory

            factory = async_session_factory

        delivered = 0
        for event in events:
            try:
                async with factory() as db:
                    if event.to_admins:
                        recipients = [u.id for u in await UserService.list_admins(db)]
                    else:
                        recipients = [event.user_id]
                    for user_id in recipients:
                        await NotificationService.create_notification(
                            db,
                            user_id=user_id,
                            title=event.title,
                            message=event.message,
                            type=event.type,
                            reference_id=event.reference_id,
                        )
                    await db.commit()
                delivered += len(recipients)
            except Exception:
                logger.exception("Failed to deliver notification '%s'", event.title)
        return delivered


async def get_outbox() -> AsyncGenerator[NotificationOutbox, None]:
    """FastAPI dependency: request-scoped outbox, flushed after the request's
    database session has committed."""
    outbox = NotificationOutbox()
    try:
        yield outbox
    except Exception:
        outbox.clear()
        raise
    await outbox.flush()
