"""Websocket-backed realtime connection."""

import uuid
from typing import Any
from uuid import UUID

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocketState

from domain.entities.realtime import frame


class WebSocketConnection:
    """One authenticated client socket."""

    def __init__(self, websocket: WebSocket, user_id: UUID) -> None:
        self.id = uuid.uuid4().hex
        self.user_id = user_id
        self._websocket = websocket

    @property
    def is_open(self) -> bool:
        return self._websocket.application_state == WebSocketState.CONNECTED

    async def send(self, event: str, data: dict[str, Any]) -> None:
        """Send one frame; raises if the socket is already gone."""
        if not self.is_open:
            raise ConnectionError(f"websocket {self.id} is closed")
        await self._websocket.send_json(jsonable_encoder(frame(event, data)))

    def __repr__(self) -> str:
        return f"WebSocketConnection(id={self.id!r}, user_id={self.user_id!r})"
