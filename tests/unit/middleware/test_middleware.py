"""Unit tests for middleware."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware


def _create_app_with_middleware() -> FastAPI:
    """Create a minimal FastAPI app with the production middleware stack."""
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def _():
        return {"ok": True}

    return app


async def _get(headers: dict[str, str] | None = None):
    app = _create_app_with_middleware()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get("/test", headers=headers)


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    @pytest.mark.asyncio
    async def test_adds_x_content_type_options(self):
        response = await _get()

        assert response.headers["x-content-type-options"] == "nosniff"

    @pytest.mark.asyncio
    async def test_adds_x_frame_options(self):
        response = await _get()

        assert response.headers["x-frame-options"] == "DENY"

    @pytest.mark.asyncio
    async def test_adds_referrer_policy(self):
        response = await _get()

        assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"


class TestRequestIDMiddleware:
    """Tests for RequestIDMiddleware."""

    @pytest.mark.asyncio
    async def test_generates_request_id_when_not_provided(self):
        response = await _get()

        assert len(response.headers["x-request-id"]) > 0

    @pytest.mark.asyncio
    async def test_propagates_existing_request_id(self):
        response = await _get({"X-Request-ID": "custom-req-123"})

        assert response.headers["x-request-id"] == "custom-req-123"

    @pytest.mark.asyncio
    async def test_replaces_unsafe_request_id(self):
        response = await _get({"X-Request-ID": "x" * 500})

        assert response.headers["x-request-id"] != "x" * 500
        assert len(response.headers["x-request-id"]) == 36

    @pytest.mark.asyncio
    async def test_generated_ids_differ(self):
        r1 = await _get()
        r2 = await _get()

        assert r1.headers["x-request-id"] != r2.headers["x-request-id"]
