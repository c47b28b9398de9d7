"""Notification Inbox - read side of notifications, recipient-only.

Invariants:
    - Only the recipient may read, mark or delete a notification (admins included)
    - list_recent is newest-first and bounded by the configured limit
    - mark_read and mark_all_read are idempotent
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.domain_types import Principal
from workboard.core.errors import ErrorContext, ForbiddenError, ResourceNotFoundError
from workboard.models.notification import Notification
from workboard.repositories.notification_repository import NotificationRepository
from workboard.schemas.notification import NotificationResponse
from workboard.services.entity_views import notification_view

logger = logging.getLogger(__name__)


class NotificationInbox:
    def __init__(self, db: AsyncSession, list_limit: int = 20):
        self.db = db
        self.notifications = NotificationRepository(db)
        self.list_limit = list_limit

    async def list_recent(self, principal: Principal) -> list[NotificationResponse]:
        rows = await self.notifications.list_recent(principal.id, self.list_limit)
        return [notification_view(n) for n in rows]

    async def mark_read(
        self, principal: Principal, notification_id: UUID,
    ) -> NotificationResponse:
        notification = await self._owned(principal, notification_id)
        if not notification.read:
            await self.notifications.mark_read(notification)
            await self.db.commit()
        return notification_view(notification)

    async def mark_all_read(self, principal: Principal) -> int:
        updated = await self.notifications.mark_all_read(principal.id)
        await self.db.commit()
        return updated

    async def delete(self, principal: Principal, notification_id: UUID) -> None:
        notification = await self._owned(principal, notification_id)
        await self.notifications.delete(notification)
        await self.db.commit()
        logger.info(
            "Notification deleted",
            extra={"principal_id": principal.id, "notification_id": notification_id},
        )

    async def _owned(
        self, principal: Principal, notification_id: UUID,
    ) -> Notification:
        notification = await self.notifications.get(notification_id)
        if notification is None:
            raise ResourceNotFoundError("Notification", notification_id)
        if notification.recipient_id != principal.id:
            raise ForbiddenError(
                "Not authorized to access this notification",
                "notification:access",
                ErrorContext(principal_id=str(principal.id)),
            )
        return notification
