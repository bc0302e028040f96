"""Notification repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.notification import Notification


class INotificationRepository(Protocol):
    """Repository interface for durable Notification rows."""

    async def create(self, notification: Notification) -> Notification:
        """Insert a single notification row."""
        ...

    async def create_batch(self, notifications: list[Notification]) -> list[Notification]:
        """Insert many notification rows in one flush."""
        ...

    async def get(self, notification_id: UUID) -> Notification | None:
        """Get a notification by ID."""
        ...

    async def list_for_user(
        self, user_id: UUID, offset: int = 0, limit: int = 20
    ) -> list[Notification]:
        """Get a user's notifications, newest first."""
        ...

    async def count_for_user(self, user_id: UUID) -> int:
        """Count all notifications of a user."""
        ...

    async def count_unread(self, user_id: UUID) -> int:
        """Count a user's unread notifications."""
        ...

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> bool:
        """Flip one unread notification owned by the user to read."""
        ...

    async def mark_many_read(self, notification_ids: list[UUID], user_id: UUID) -> int:
        """Flip the given unread notifications owned by the user. Returns count."""
        ...

    async def mark_all_read(self, user_id: UUID) -> int:
        """Flip every unread notification of the user. Returns count."""
        ...
