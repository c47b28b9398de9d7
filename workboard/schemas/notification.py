"""Notification Schemas - inbox views."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    recipient_id: UUID
    message: str
    link: str | None = None
    read: bool
    created_at: datetime


class MarkAllReadResponse(BaseModel):
    """Number of notifications that changed from unread to read."""
    updated: int
