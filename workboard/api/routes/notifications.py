"""Notification Routes - the principal's own inbox."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from workboard.api.dependencies import get_inbox, get_principal
from workboard.core.domain_types import Principal
from workboard.schemas.notification import MarkAllReadResponse, NotificationResponse
from workboard.services.notification_inbox import NotificationInbox

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    principal: Principal = Depends(get_principal),
    inbox: NotificationInbox = Depends(get_inbox),
):
    return await inbox.list_recent(principal)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    principal: Principal = Depends(get_principal),
    inbox: NotificationInbox = Depends(get_inbox),
):
    return MarkAllReadResponse(updated=await inbox.mark_all_read(principal))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    principal: Principal = Depends(get_principal),
    inbox: NotificationInbox = Depends(get_inbox),
):
    return await inbox.mark_read(principal, notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    principal: Principal = Depends(get_principal),
    inbox: NotificationInbox = Depends(get_inbox),
):
    await inbox.delete(principal, notification_id)
