"""Realtime connection and registry protocols."""

from typing import Any, Protocol


class IConnection(Protocol):
    """One live client session."""

    id: str
    user_id: Any

    async def send(self, event: str, data: dict[str, Any]) -> None:
        """Send one ``{"event", "data"}`` frame to the client."""
        ...


class IConnectionRegistry(Protocol):
    """Room membership of the live connections in this process."""

    def register(self, connection: IConnection) -> None: ...

    def deregister(self, connection: IConnection) -> None: ...

    def join(self, connection: IConnection, room: str) -> None: ...

    def leave(self, connection: IConnection, room: str) -> None: ...

    def members_of(self, room: str) -> list[IConnection]: ...

    def all_connections(self) -> list[IConnection]: ...
