"""Fixtures for integration tests: an app wired to the test database."""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Any
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from infrastructure.auth.provider import TokenUser
from infrastructure.realtime.registry import ConnectionRegistry


class RecordingSocket:
    """Registry member that records pushed frames."""

    def __init__(self, user_id: UUID, fail: bool = False) -> None:
        self.id = uuid4().hex
        self.user_id = user_id
        self.fail = fail
        self.frames: list[tuple[str, dict[str, Any]]] = []

    async def send(self, event: str, data: dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.frames.append((event, data))


@dataclass
class ApiHarness:
    app: FastAPI
    client: AsyncClient
    registry: ConnectionRegistry

    def login_as(self, user: TokenUser) -> None:
        """Make every following request authenticate as ``user``."""
        from api.dependencies.auth import get_current_user

        async def override_get_user() -> TokenUser:
            return user

        self.app.dependency_overrides[get_current_user] = override_get_user

    def socket_for(self, user_id: UUID, room: str, fail: bool = False) -> RecordingSocket:
        sock = RecordingSocket(user_id, fail=fail)
        self.registry.join(sock, room)
        return sock


@pytest.fixture
async def api(uow_factory, test_user, test_profile) -> AsyncGenerator[ApiHarness, None]:
    """
    Create an authenticated test client with database and registry wired up.

    This client:
    - Uses the in-memory SQLite database
    - Authenticates as the test user unless ``login_as`` says otherwise
    - Shares a connection registry the test can put recording sockets in
    """
    from api.v1.dependencies import get_notification_service, get_uow_factory
    from domain.services.notification_service import NotificationService
    from main import create_app

    app = create_app()
    registry = ConnectionRegistry()
    # ASGITransport does not run the lifespan
    app.state.connection_registry = registry

    app.dependency_overrides[get_uow_factory] = lambda: uow_factory
    app.dependency_overrides[get_notification_service] = lambda: NotificationService(
        uow_factory
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        harness = ApiHarness(app=app, client=c, registry=registry)
        harness.login_as(test_user)
        yield harness

    app.dependency_overrides.clear()
