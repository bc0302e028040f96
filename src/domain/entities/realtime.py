"""Realtime room naming and wire event names."""

from typing import Any
from uuid import UUID

SUPPORT_ROOM = "support"


class RealtimeEvents:
    """Event names carried in the ``event`` field of a websocket frame."""

    # Client -> server
    JOIN_USER_ROOM = "join_user_room"
    JOIN_COURSE_ROOM = "join_course_room"
    JOIN_GROUP_ROOM = "join_group_room"
    JOIN_SUPPORT = "join_support"
    LEAVE_SUPPORT = "leave_support"

    # Server -> client
    SUPPORT_JOINED = "support_joined"
    NEW_NOTIFICATION = "new_notification"
    NEW_COURSE_NOTIFICATION = "new_course_notification"
    NEW_GROUP_NOTIFICATION = "new_group_notification"
    GLOBAL_NOTIFICATION = "global_notification"
    NOTIFICATION_UPDATED = "notification_updated"
    ERROR = "error"


def user_room(user_id: UUID | str) -> str:
    return f"user:{user_id}"


def course_room(course_id: UUID | str) -> str:
    return f"course:{course_id}"


def group_room(group_id: UUID | str) -> str:
    return f"group:{group_id}"


def frame(event: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the ``{"event", "data"}`` envelope used in both directions."""
    return {"event": event, "data": data or {}}
