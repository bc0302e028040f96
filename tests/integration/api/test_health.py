"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient

from domain.entities.realtime import user_room


class TestHealthEndpoint:
    """Tests for the basic health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_returns_correct_structure(self, client: AsyncClient) -> None:
        data = (await client.get("/health")).json()

        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data
        assert "environment" in data

    @pytest.mark.asyncio
    async def test_health_has_security_headers(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert "x-request-id" in response.headers


class TestDetailedHealthEndpoint:
    """Tests for the detailed health check endpoint."""

    @pytest.fixture
    def wired(self, api, session_factory):
        from infrastructure.database.session import get_async_session

        async def override_session():
            async with session_factory() as session:
                yield session

        api.app.dependency_overrides[get_async_session] = override_session
        return api

    @pytest.mark.asyncio
    async def test_reports_database_and_connection_count(self, wired, test_user) -> None:
        wired.socket_for(test_user.id, user_room(test_user.id))

        response = await wired.client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["realtime_connections"] == 1
