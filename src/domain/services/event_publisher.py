"""Realtime push of already-persisted notifications."""

import asyncio
from typing import Any
from uuid import UUID

import structlog

from domain.entities.notification import NotificationEvent
from domain.entities.realtime import (
    RealtimeEvents,
    course_room,
    group_room,
    user_room,
)
from domain.repositories.connection_registry import IConnection, IConnectionRegistry

logger = structlog.get_logger()


def _room_sends(
    registry: IConnectionRegistry, room: str, event_name: str
) -> list[tuple[IConnection, str]]:
    return [(conn, event_name) for conn in registry.members_of(room)]


def build_payload(event: NotificationEvent) -> dict[str, Any]:
    """Wire payload shared by every notification push message."""
    return {
        "title": event.title,
        "message": event.message,
        "type": event.type.value,
        "link": event.link,
        "timestamp": event.emitted_at.isoformat(),
    }


class EventPublisher:
    """Fire-and-forget fan-out of notification events to live connections.

    Delivery is best effort: no retries, no acknowledgements. Clients that
    are offline find the notification in the durable store instead.
    """

    def __init__(self, registry: IConnectionRegistry | None) -> None:
        self._registry = registry

    async def publish(self, event: NotificationEvent) -> int:
        """Push an event to every room it addresses.

        All matching targets are used, not just the first one. Returns the
        number of frames handed to connections.
        """
        if self._registry is None:
            logger.debug("realtime_registry_missing", title=event.title)
            return 0

        registry = self._registry
        payload = build_payload(event)
        sends: list[tuple[IConnection, str]] = []

        for user_id in event.user_ids:
            sends += _room_sends(
                registry, user_room(user_id), RealtimeEvents.NEW_NOTIFICATION
            )
        if event.course_id is not None:
            sends += _room_sends(
                registry,
                course_room(event.course_id),
                RealtimeEvents.NEW_COURSE_NOTIFICATION,
            )
        if event.group_id is not None:
            sends += _room_sends(
                registry,
                group_room(event.group_id),
                RealtimeEvents.NEW_GROUP_NOTIFICATION,
            )
        if not event.user_ids and event.course_id is None and event.group_id is None:
            sends += [
                (conn, RealtimeEvents.GLOBAL_NOTIFICATION)
                for conn in registry.all_connections()
            ]
        if event.exclude_user_ids:
            excluded = set(event.exclude_user_ids)
            sends = [(conn, name) for conn, name in sends if conn.user_id not in excluded]

        if not sends:
            logger.debug("realtime_no_listeners", title=event.title)
            return 0

        return await self._emit(sends, payload)

    async def publish_updated(self, user_id: UUID) -> int:
        """Tell a user's open sessions that their read state changed."""
        if self._registry is None:
            return 0
        sends = _room_sends(
            self._registry, user_room(user_id), RealtimeEvents.NOTIFICATION_UPDATED
        )
        if not sends:
            return 0
        return await self._emit(sends, {"user_id": str(user_id)})

    async def _emit(
        self, sends: list[tuple[IConnection, str]], payload: dict[str, Any]
    ) -> int:
        results = await asyncio.gather(
            *(conn.send(event_name, payload) for conn, event_name in sends),
            return_exceptions=True,
        )
        delivered = 0
        for (conn, event_name), result in zip(sends, results):
            if isinstance(result, Exception):
                # A connection that dropped mid-send is deregistered by its own
                # receive loop.
                logger.warning(
                    "realtime_send_failed",
                    connection_id=conn.id,
                    frame_event=event_name,
                    error=str(result),
                )
            else:
                delivered += 1
        return delivered
