"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.notifications = AsyncMock()
        self.directory = AsyncMock()
        self.commits = 0
        self.rolled_back = False

    @property
    def committed(self) -> bool:
        return self.commits > 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class FakeConnection:
    """Records every frame sent to it."""

    def __init__(self, user_id: UUID | None = None, fail: bool = False) -> None:
        self.id = uuid4().hex
        self.user_id = user_id or uuid4()
        self.fail = fail
        self.sent: list[tuple[str, dict[str, Any]]] = []

    async def send(self, event: str, data: dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.sent.append((event, data))

    def events(self) -> list[str]:
        return [event for event, _ in self.sent]


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def course_id() -> UUID:
    """A random course ID."""
    return uuid4()


@pytest.fixture
def group_id() -> UUID:
    """A random group ID."""
    return uuid4()


@pytest.fixture
def make_connection() -> type[FakeConnection]:
    """Factory for fake realtime connections."""
    return FakeConnection
