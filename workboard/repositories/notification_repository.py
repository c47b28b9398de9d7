"""Notification Repository - per-recipient notification rows."""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from workboard.models.notification import Notification


class NotificationRepository:
    """NotificationStore over SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, recipient_id: UUID, message: str, link: str | None,
    ) -> Notification:
        notification = Notification(
            recipient_id=recipient_id, message=message, link=link, read=False,
        )
        self.db.add(notification)
        await self.db.flush()
        return notification

    async def get(self, notification_id: UUID) -> Notification | None:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.id == notification_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def list_recent(
        self, recipient_id: UUID, limit: int,
    ) -> list[Notification]:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.recipient_id == recipient_id)
            .order_by(Notification.created_at.desc())
            .limit(limit),
        )
        return list(result.scalars().all())

    async def mark_read(self, notification: Notification) -> Notification:
        notification.read = True
        await self.db.flush()
        return notification

    async def mark_all_read(self, recipient_id: UUID) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.recipient_id == recipient_id)
            .where(Notification.read.is_(False))
            .values(read=True),
        )
        return result.rowcount or 0

    async def delete(self, notification: Notification) -> None:
        await self.db.delete(notification)
        await self.db.flush()
