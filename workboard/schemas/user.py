"""User Schemas - directory views and the admin role change body."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from workboard.core.domain_types import Role


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    email: str
    role: Role


class RoleUpdate(BaseModel):
    role: Role
