"""Admin-only notification routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_announcement_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.notification import BroadcastRequest, DeliveryResponse
from core.rate_limit import limiter
from domain.services.announcement_service import AnnouncementService

router = APIRouter(prefix="/admin/notifications", tags=["admin"])


@router.post(
    "/broadcast",
    response_model=DeliveryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Broadcast to every user",
    responses={
        201: {"description": "One notification stored per active user"},
        403: {"model": ErrorResponse, "description": "Admin role required"},
        503: {"model": ErrorResponse, "description": "Notification storage unavailable"},
    },
)
@limiter.limit("5/minute")  # type: ignore[untyped-decorator]
async def broadcast_notification(
    request: Request,
    body: BroadcastRequest,
    user: CurrentUser,
    service: AnnouncementService = Depends(get_announcement_service),
) -> DeliveryResponse:
    """Store a notification for every active user and push it to all connections."""
    result = await service.broadcast(
        sender_id=user.id,
        sender_roles=user.roles,
        title=body.title,
        message=body.message,
        type=body.type,
        link=body.link,
    )
    return DeliveryResponse(recipient_count=result.recipient_count)
