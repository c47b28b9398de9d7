"""Notification Dispatcher - durable per-recipient notices plus a live hint.

Invariants:
    - notify() is called only after the triggering commit succeeded
    - Persistence uses its own short-lived session: a failure never touches
      the triggering operation's transaction
    - notify() never raises: failures are logged and absorbed (returns False)
    - The live hint goes to scope user:{recipient} only after the row is committed

Design Decisions:
    - Session factory injected (db_manager.session in the app, a test factory in tests)
    - Sequential awaits per recipient: recipient sets are small (creator, assignee, lead)
"""

import logging
from collections.abc import Callable, Iterable
from contextlib import AbstractAsyncContextManager
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.domain_types import LiveEvent
from workboard.core.scopes import user_scope
from workboard.infrastructure.broadcast import BroadcastHub
from workboard.repositories.notification_repository import NotificationRepository
from workboard.services import live_events
from workboard.services.entity_views import notification_view, to_payload

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class NotificationDispatcher:
    """Fire-and-forget notification sink for workflow side effects."""

    def __init__(self, session_factory: SessionFactory, hub: BroadcastHub | None = None):
        self._session_factory = session_factory
        self._hub = hub

    async def notify(
        self, recipient_id: UUID | None, message: str, link: str | None = None,
    ) -> bool:
        """Persist one notification. Returns False when skipped or failed."""
        if not recipient_id or not message or not message.strip():
            logger.warning("Notification skipped: missing recipient or message")
            return False
        try:
            async with self._session_factory() as db:
                notification = await NotificationRepository(db).create(
                    recipient_id, message, link,
                )
                payload = to_payload(notification_view(notification))
                await db.commit()
        except Exception as e:
            logger.error(
                f"Failed to persist notification: {e}",
                extra={"principal_id": recipient_id},
            )
            return False

        logger.debug(
            "Notification created",
            extra={"principal_id": recipient_id, "notification_id": payload["id"]},
        )
        await live_events.publish(
            self._hub, [user_scope(recipient_id)], LiveEvent.NOTIFICATION, payload,
        )
        return True

    async def notify_many(
        self, recipient_ids: Iterable[UUID], message: str, link: str | None = None,
    ) -> int:
        """Notify each recipient once. Returns how many were persisted."""
        sent = 0
        for recipient_id in dict.fromkeys(recipient_ids):
            if await self.notify(recipient_id, message, link):
                sent += 1
        return sent
