"""User Repository - point lookups and set-membership finds over users."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workboard.models.user import User


class UserRepository:
    """UserStore over SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UUID) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_many(self, user_ids: Sequence[UUID]) -> list[User]:
        if not user_ids:
            return []
        result = await self.db.execute(
            select(User).where(User.id.in_(set(user_ids))),
        )
        return list(result.scalars().all())

    async def list_all(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.full_name))
        return list(result.scalars().all())

    async def set_role(self, user: User, role: str) -> User:
        user.role = role
        await self.db.flush()
        return user
