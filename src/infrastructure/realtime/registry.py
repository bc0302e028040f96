"""In-process registry of live websocket connections and their rooms."""

from collections import defaultdict

import structlog

from domain.repositories.connection_registry import IConnection

logger = structlog.get_logger()


class ConnectionRegistry:
    """Room -> connections mapping for one server process.

    Created by the application lifespan and handed to whoever needs it; there
    is no module-level instance. Every method is synchronous, so each call
    runs to completion on the event loop without interleaving with another
    coroutine. Readers always receive copies.
    """

    def __init__(self) -> None:
        self._connections: dict[str, IConnection] = {}
        self._rooms: dict[str, set[str]] = defaultdict(set)
        self._memberships: dict[str, set[str]] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def register(self, connection: IConnection) -> None:
        """Track a new connection with no rooms."""
        self._connections[connection.id] = connection
        self._memberships.setdefault(connection.id, set())
        logger.debug("realtime_connection_registered", connection_id=connection.id)

    def deregister(self, connection: IConnection) -> None:
        """Forget a connection and remove it from every room it joined."""
        rooms = self._memberships.pop(connection.id, set())
        for room in rooms:
            self._discard(room, connection.id)
        self._connections.pop(connection.id, None)
        logger.debug(
            "realtime_connection_deregistered",
            connection_id=connection.id,
            room_count=len(rooms),
        )

    def join(self, connection: IConnection, room: str) -> None:
        """Add a connection to a room. Joining twice is a no-op."""
        if connection.id not in self._connections:
            self.register(connection)
        self._rooms[room].add(connection.id)
        self._memberships[connection.id].add(room)

    def leave(self, connection: IConnection, room: str) -> None:
        """Remove a connection from a room. Leaving a non-member room is a no-op."""
        memberships = self._memberships.get(connection.id)
        if memberships is None or room not in memberships:
            return
        memberships.discard(room)
        self._discard(room, connection.id)

    def members_of(self, room: str) -> list[IConnection]:
        """Snapshot of the connections currently in a room."""
        ids = self._rooms.get(room, ())
        return [self._connections[cid] for cid in ids if cid in self._connections]

    def rooms_of(self, connection: IConnection) -> set[str]:
        return set(self._memberships.get(connection.id, ()))

    def get_connection(self, connection_id: str) -> IConnection | None:
        return self._connections.get(connection_id)

    def all_connections(self) -> list[IConnection]:
        return list(self._connections.values())

    def close(self) -> None:
        """Drop every connection; used at process shutdown."""
        count = len(self._connections)
        self._connections.clear()
        self._rooms.clear()
        self._memberships.clear()
        logger.info("realtime_registry_closed", connection_count=count)

    def _discard(self, room: str, connection_id: str) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(connection_id)
        if not members:
            del self._rooms[room]
