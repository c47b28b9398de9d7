"""User Routes - directory listing and admin role changes."""

from uuid import UUID

from fastapi import APIRouter, Depends

from workboard.api.dependencies import get_principal, get_user_directory
from workboard.core.domain_types import Principal
from workboard.schemas.user import RoleUpdate, UserResponse
from workboard.services.user_directory import UserDirectory

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    principal: Principal = Depends(get_principal),
    directory: UserDirectory = Depends(get_user_directory),
):
    return await directory.list_users(principal)


@router.put("/{user_id}/role", response_model=UserResponse)
async def set_role(
    user_id: UUID,
    body: RoleUpdate,
    principal: Principal = Depends(get_principal),
    directory: UserDirectory = Depends(get_user_directory),
):
    return await directory.set_role(principal, user_id, body.role)
