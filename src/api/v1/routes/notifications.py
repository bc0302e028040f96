"""Notification inbox and manual send routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import (
    get_announcement_service,
    get_event_publisher,
    get_notification_service,
)
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.notification import (
    DeliveryResponse,
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
    SendNotificationRequest,
    UnreadCountResponse,
)
from core.rate_limit import limiter
from domain.services.announcement_service import AnnouncementService
from domain.services.event_publisher import EventPublisher
from domain.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List my notifications",
    responses={
        200: {"description": "One inbox page, newest first"},
        400: {"model": ErrorResponse, "description": "Invalid page"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_notifications(
    request: Request,
    user: CurrentUser,
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """List the current user's notifications with the unread count."""
    result = await service.list_for_user(user.id, page=page, page_size=page_size)
    return NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in result.items],
        meta={
            "unread_count": result.unread_count,
            "total": result.total,
            "page": result.page,
            "page_size": result.page_size,
        },
    )


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Get unread notification count",
    responses={
        200: {"description": "Unread count for the badge"},
    },
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def get_unread_count(
    request: Request,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> UnreadCountResponse:
    """Get the current user's unread notification count."""
    count = await service.count_unread(user.id)
    return UnreadCountResponse(count=count)


@router.patch(
    "/{notification_id}/read",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark notification as read",
    responses={
        204: {"description": "Notification marked as read"},
        403: {"model": ErrorResponse, "description": "Notification belongs to another user"},
        404: {"model": ErrorResponse, "description": "Notification not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def mark_notification_read(
    request: Request,
    notification_id: UUID,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> None:
    """Mark one notification as read. Requires ownership."""
    if await service.mark_read(notification_id, user.id):
        await publisher.publish_updated(user.id)


@router.post(
    "/mark-read",
    response_model=MarkReadResponse,
    summary="Mark several notifications as read",
    responses={
        200: {"description": "Count of notifications marked as read"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def mark_notifications_read(
    request: Request,
    body: MarkReadRequest,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> MarkReadResponse:
    """Mark the given notifications as read. IDs of other users are skipped."""
    count = await service.mark_many_read(body.notification_ids, user.id)
    if count:
        await publisher.publish_updated(user.id)
    return MarkReadResponse(count=count)


@router.post(
    "/mark-all-read",
    response_model=MarkReadResponse,
    summary="Mark all notifications as read",
    responses={
        200: {"description": "Count of notifications marked as read"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def mark_all_notifications_read(
    request: Request,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> MarkReadResponse:
    """Mark every notification of the current user as read."""
    count = await service.mark_all_read(user.id)
    if count:
        await publisher.publish_updated(user.id)
    return MarkReadResponse(count=count)


@router.post(
    "/send",
    response_model=DeliveryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a notification",
    responses={
        201: {"description": "Notification stored and pushed"},
        400: {"model": ErrorResponse, "description": "Invalid notification"},
        403: {"model": ErrorResponse, "description": "Sender may not address this target"},
        404: {"model": ErrorResponse, "description": "Target resolved to nobody"},
        503: {"model": ErrorResponse, "description": "Notification storage unavailable"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def send_notification(
    request: Request,
    body: SendNotificationRequest,
    user: CurrentUser,
    service: AnnouncementService = Depends(get_announcement_service),
) -> DeliveryResponse:
    """Send to explicit users, a group, a course, or everyone.

    Instructors may address their own courses and groups; admins anything.
    """
    result = await service.send_manual(
        sender_id=user.id,
        sender_roles=user.roles,
        title=body.title,
        message=body.message,
        type=body.type,
        link=body.link,
        user_ids=body.user_ids,
        course_id=body.course_id,
        group_id=body.group_id,
        send_to_all=body.send_to_all,
    )
    return DeliveryResponse(recipient_count=result.recipient_count)
