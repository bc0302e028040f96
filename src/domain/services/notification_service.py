"""Notification service layer: the durable notification store."""

from collections.abc import Callable, Iterable
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import (
    NotificationNotFoundError,
    NotificationPermissionError,
    NotificationValidationError,
)
from domain.entities.notification import (
    Notification,
    NotificationPage,
    NotificationType,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class NotificationService:
    """Create, list and mark notifications.

    The create methods run inside a Unit of Work owned by the caller, so the
    Delivery service decides when rows are committed. Read and mark methods
    open their own Unit of Work.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        batch_size: int | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._batch_size = batch_size or settings.notification_batch_size

    @property
    def batch_size(self) -> int:
        return self._batch_size

    # --- In-transaction creation ---

    async def create_for_user(
        self,
        uow: IUnitOfWork,
        user_id: UUID,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        link: str | None = None,
        course_id: UUID | None = None,
        group_id: UUID | None = None,
        sent_by_id: UUID | None = None,
    ) -> Notification:
        """Insert one unread notification for a single recipient."""
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            link=link,
            course_id=course_id,
            group_id=group_id,
            sent_by_id=sent_by_id,
        )
        return await uow.notifications.create(notification)

    async def create_for_users(
        self,
        uow: IUnitOfWork,
        user_ids: Iterable[UUID],
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        link: str | None = None,
        course_id: UUID | None = None,
        group_id: UUID | None = None,
        sent_by_id: UUID | None = None,
    ) -> list[Notification]:
        """Insert one unread notification per recipient (fan-out on write)."""
        notifications = [
            Notification(
                user_id=uid,
                title=title,
                message=message,
                type=type,
                link=link,
                course_id=course_id,
                group_id=group_id,
                sent_by_id=sent_by_id,
            )
            for uid in user_ids
        ]
        if not notifications:
            return []
        return await uow.notifications.create_batch(notifications)

    # --- Read methods (use own UoW context) ---

    async def list_for_user(
        self, user_id: UUID, page: int = 1, page_size: int = 20
    ) -> NotificationPage:
        """Get one page of a user's inbox, newest first, with the unread count."""
        if page < 1:
            raise NotificationValidationError("page must be at least 1", field="page")
        if not 1 <= page_size <= settings.notification_page_size_max:
            raise NotificationValidationError(
                f"page_size must be between 1 and {settings.notification_page_size_max}",
                field="page_size",
            )

        async with self._uow_factory() as uow:
            items = await uow.notifications.list_for_user(
                user_id, offset=(page - 1) * page_size, limit=page_size
            )
            total = await uow.notifications.count_for_user(user_id)
            unread_count = await uow.notifications.count_unread(user_id)

        return NotificationPage(
            items=items,
            total=total,
            unread_count=unread_count,
            page=page,
            page_size=page_size,
        )

    async def count_unread(self, user_id: UUID) -> int:
        """Get the count of unread notifications."""
        async with self._uow_factory() as uow:
            return await uow.notifications.count_unread(user_id)

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> bool:
        """Mark one notification read.

        Returns True when the row flipped, False when it was already read.

        Raises:
            NotificationNotFoundError: No such notification.
            NotificationPermissionError: The notification belongs to someone else.
        """
        async with self._uow_factory() as uow:
            notification = await uow.notifications.get(notification_id)
            if not notification:
                raise NotificationNotFoundError(str(notification_id))
            if notification.user_id != user_id:
                logger.warning(
                    "notification_mark_read_forbidden",
                    notification_id=str(notification_id),
                    user_id=str(user_id),
                )
                raise NotificationPermissionError(str(notification_id))
            if notification.is_read:
                return False

            flipped = await uow.notifications.mark_read(notification_id, user_id)
            await uow.commit()
            return flipped

    async def mark_many_read(self, notification_ids: list[UUID], user_id: UUID) -> int:
        """Mark several notifications read; IDs owned by other users are ignored."""
        if not notification_ids:
            raise NotificationValidationError(
                "At least one notification id is required", field="notification_ids"
            )
        async with self._uow_factory() as uow:
            count = await uow.notifications.mark_many_read(notification_ids, user_id)
            await uow.commit()
            return count

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark all notifications as read. Returns count of marked."""
        async with self._uow_factory() as uow:
            count = await uow.notifications.mark_all_read(user_id)
            await uow.commit()
            return count
