"""Pydantic schemas for Notification API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.notification import (
    MESSAGE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    NotificationType,
)


class NotificationResponse(BaseModel):
    """Single notification in the inbox."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    message: str
    type: NotificationType
    link: str | None = None
    course_id: UUID | None = None
    group_id: UUID | None = None
    sent_by_id: UUID | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime


class NotificationListResponse(BaseModel):
    """Paginated inbox response."""

    data: list[NotificationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class UnreadCountResponse(BaseModel):
    """Unread notification count response."""

    count: int


class MarkReadRequest(BaseModel):
    """Notifications to mark as read in one call."""

    notification_ids: list[UUID] = Field(..., min_length=1, max_length=100)


class MarkReadResponse(BaseModel):
    """Response for the bulk mark-read operations."""

    count: int  # Number of notifications that flipped to read


class SendNotificationRequest(BaseModel):
    """Manual send by an instructor or admin.

    Exactly one target is used, in this order: ``send_to_all``, ``user_ids``,
    ``group_id``, ``course_id``.
    """

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)
    type: NotificationType = NotificationType.INFO
    link: str | None = Field(None, max_length=500)
    user_ids: list[UUID] | None = None
    course_id: UUID | None = None
    group_id: UUID | None = None
    send_to_all: bool = False


class BroadcastRequest(BaseModel):
    """Admin broadcast to every active user."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_LENGTH)
    type: NotificationType = NotificationType.ANNOUNCEMENT
    link: str | None = Field(None, max_length=500)


class DeliveryResponse(BaseModel):
    """Outcome of a send."""

    recipient_count: int
