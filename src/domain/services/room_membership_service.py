"""Room membership protocol: client join/leave messages."""

from collections.abc import Awaitable, Callable
from typing import Any
from uuid import UUID

import structlog

from domain.entities.realtime import (
    SUPPORT_ROOM,
    RealtimeEvents,
    course_room,
    group_room,
    user_room,
)
from domain.repositories.connection_registry import IConnection, IConnectionRegistry
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

SUPPORT_JOINED_MESSAGE = "Connected to support"

MessageHandler = Callable[[IConnection, dict[str, Any]], Awaitable[None]]


class RoomJoinRefused(Exception):
    """A client message was malformed or not allowed for this connection."""


def _parse_id(data: dict[str, Any], key: str) -> UUID:
    raw = data.get(key)
    if raw is None:
        raise RoomJoinRefused(f"{key} is required")
    try:
        return UUID(str(raw))
    except ValueError as e:
        raise RoomJoinRefused(f"{key} is not a valid id") from e


class RoomMembershipService:
    """Attach connections to the rooms they are allowed to listen on.

    Handlers are looked up by event name; :meth:`subscribe` adds or replaces
    one. User and support rooms require the named user to be the
    authenticated one, group rooms require membership and course rooms an
    approved enrollment.
    """

    def __init__(
        self,
        registry: IConnectionRegistry,
        uow_factory: Callable[[], IUnitOfWork],
    ) -> None:
        self._registry = registry
        self._uow_factory = uow_factory
        self._handlers: dict[str, MessageHandler] = {}

        self.subscribe(RealtimeEvents.JOIN_USER_ROOM, self._join_user_room)
        self.subscribe(RealtimeEvents.JOIN_COURSE_ROOM, self._join_course_room)
        self.subscribe(RealtimeEvents.JOIN_GROUP_ROOM, self._join_group_room)
        self.subscribe(RealtimeEvents.JOIN_SUPPORT, self._join_support)
        self.subscribe(RealtimeEvents.LEAVE_SUPPORT, self._leave_support)

    def subscribe(self, event_name: str, handler: MessageHandler) -> None:
        """Register the handler for one client event name."""
        self._handlers[event_name] = handler

    def connect(self, connection: IConnection) -> None:
        self._registry.register(connection)
        logger.info(
            "realtime_connected",
            connection_id=connection.id,
            user_id=str(connection.user_id),
        )

    def disconnect(self, connection: IConnection) -> None:
        self._registry.deregister(connection)
        logger.info(
            "realtime_disconnected",
            connection_id=connection.id,
            user_id=str(connection.user_id),
        )

    async def handle(self, connection: IConnection, message: Any) -> None:
        """Dispatch one decoded client frame.

        Refusals are answered with an ``error`` frame; the connection stays open.
        """
        if not isinstance(message, dict):
            await self._refuse(connection, None, "Frame must be a JSON object")
            return

        event_name = message.get("event")
        data = message.get("data") or {}
        handler = self._handlers.get(event_name) if isinstance(event_name, str) else None
        if handler is None:
            await self._refuse(connection, event_name, f"Unknown event: {event_name}")
            return
        if not isinstance(data, dict):
            await self._refuse(connection, event_name, "data must be a JSON object")
            return

        try:
            await handler(connection, data)
        except RoomJoinRefused as e:
            await self._refuse(connection, event_name, str(e))

    # --- Handlers ---

    async def _join_user_room(self, connection: IConnection, data: dict[str, Any]) -> None:
        user_id = self._require_self(connection, data)
        self._registry.join(connection, user_room(user_id))

    async def _join_course_room(self, connection: IConnection, data: dict[str, Any]) -> None:
        course_id = _parse_id(data, "courseId")
        async with self._uow_factory() as uow:
            allowed = await uow.directory.is_approved_enrollee(course_id, connection.user_id)
        if not allowed:
            raise RoomJoinRefused("Not enrolled in this course")
        self._registry.join(connection, course_room(course_id))

    async def _join_group_room(self, connection: IConnection, data: dict[str, Any]) -> None:
        group_id = _parse_id(data, "groupId")
        async with self._uow_factory() as uow:
            allowed = await uow.directory.is_group_member(group_id, connection.user_id)
        if not allowed:
            raise RoomJoinRefused("Not a member of this group")
        self._registry.join(connection, group_room(group_id))

    async def _join_support(self, connection: IConnection, data: dict[str, Any]) -> None:
        self._require_self(connection, data)
        self._registry.join(connection, SUPPORT_ROOM)
        await connection.send(
            RealtimeEvents.SUPPORT_JOINED, {"message": SUPPORT_JOINED_MESSAGE}
        )

    async def _leave_support(self, connection: IConnection, data: dict[str, Any]) -> None:
        self._require_self(connection, data)
        self._registry.leave(connection, SUPPORT_ROOM)

    # --- Helpers ---

    def _require_self(self, connection: IConnection, data: dict[str, Any]) -> UUID:
        user_id = _parse_id(data, "userId")
        if user_id != connection.user_id:
            raise RoomJoinRefused("Cannot join another user's room")
        return user_id

    async def _refuse(self, connection: IConnection, event_name: Any, reason: str) -> None:
        logger.info(
            "realtime_message_refused",
            connection_id=connection.id,
            frame_event=event_name,
            reason=reason,
        )
        await connection.send(RealtimeEvents.ERROR, {"message": reason, "event": event_name})
