"""Realtime websocket endpoint."""

import orjson
import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies.auth import WebSocketUser
from api.v1.dependencies import get_room_membership_service
from domain.entities.realtime import RealtimeEvents
from domain.services.room_membership_service import RoomMembershipService
from infrastructure.realtime.connection import WebSocketConnection

logger = structlog.get_logger()

router = APIRouter(prefix="/realtime", tags=["realtime"])


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    user: WebSocketUser,
    service: RoomMembershipService = Depends(get_room_membership_service),
) -> None:
    """Authenticated socket speaking ``{"event", "data"}`` JSON frames.

    Connect with ``?token=<jwt>``. A missing or invalid token closes the
    handshake with 1008.
    """
    if user is None:
        logger.info("realtime_auth_failed")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    connection = WebSocketConnection(websocket, user.id)
    service.connect(connection)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = orjson.loads(raw)
            except orjson.JSONDecodeError:
                await connection.send(
                    RealtimeEvents.ERROR, {"message": "Invalid JSON", "event": None}
                )
                continue

            try:
                await service.handle(connection, message)
            except SQLAlchemyError as e:
                logger.error(
                    "realtime_directory_lookup_failed",
                    connection_id=connection.id,
                    error=str(e),
                )
                await connection.send(
                    RealtimeEvents.ERROR,
                    {
                        "message": "Temporarily unable to join room",
                        "event": message.get("event") if isinstance(message, dict) else None,
                    },
                )
    except WebSocketDisconnect:
        pass
    finally:
        service.disconnect(connection)
