"""User Directory - list users and let admins change roles."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workboard.core.authorization import NO_RESOURCE, authorize
from workboard.core.domain_types import Action, Principal, Role
from workboard.core.errors import ResourceNotFoundError
from workboard.repositories.user_repository import UserRepository
from workboard.schemas.user import UserResponse

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)

    async def list_users(self, principal: Principal) -> list[UserResponse]:
        return [UserResponse.model_validate(u) for u in await self.users.list_all()]

    async def set_role(
        self, principal: Principal, user_id: UUID, role: Role,
    ) -> UserResponse:
        authorize(principal, NO_RESOURCE, Action.USER_MANAGE_ROLE)
        user = await self.users.get(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        await self.users.set_role(user, role.value)
        await self.db.commit()
        logger.info(
            f"Role changed to {role.value}",
            extra={"principal_id": principal.id},
        )
        return UserResponse.model_validate(user)
