"""SQLAlchemy implementation of Notification repository."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.notification import Notification, NotificationType
from infrastructure.database.models import NotificationModel


class SQLAlchemyNotificationRepository:
    """SQLAlchemy implementation of INotificationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, notification: Notification) -> Notification:
        """Insert a single notification row."""
        model = self._to_model(notification)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def create_batch(self, notifications: list[Notification]) -> list[Notification]:
        """Insert many notification rows in one flush."""
        models = [self._to_model(n) for n in notifications]
        self._session.add_all(models)
        await self._session.flush()
        return [self._to_entity(m) for m in models]

    async def get(self, notification_id: UUID) -> Notification | None:
        """Get a notification by ID."""
        stmt = select(NotificationModel).where(NotificationModel.id == notification_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_for_user(
        self, user_id: UUID, offset: int = 0, limit: int = 20
    ) -> list[Notification]:
        """Get a user's notifications, newest first."""
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(m) for m in result.scalars()]

    async def count_for_user(self, user_id: UUID) -> int:
        """Count all notifications of a user."""
        stmt = select(func.count(NotificationModel.id)).where(
            NotificationModel.user_id == user_id
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def count_unread(self, user_id: UUID) -> int:
        """Count a user's unread notifications."""
        stmt = select(func.count(NotificationModel.id)).where(
            NotificationModel.user_id == user_id,
            NotificationModel.is_read.is_(False),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> bool:
        """Flip one unread notification owned by the user to read."""
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.id == notification_id,
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def mark_many_read(self, notification_ids: list[UUID], user_id: UUID) -> int:
        """Flip the given unread notifications owned by the user. Returns count."""
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.id.in_(notification_ids),
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount  # type: ignore[attr-defined]

    async def mark_all_read(self, user_id: UUID) -> int:
        """Flip every unread notification of the user. Returns count."""
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .values(is_read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount  # type: ignore[attr-defined]

    # --- Conversion methods ---

    def _to_entity(self, model: NotificationModel) -> Notification:
        """Convert NotificationModel to domain entity."""
        return Notification(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            message=model.message,
            type=NotificationType(model.type),
            link=model.link,
            course_id=model.course_id,
            group_id=model.group_id,
            sent_by_id=model.sent_by_id,
            is_read=model.is_read,
            read_at=model.read_at,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Notification) -> NotificationModel:
        """Convert Notification domain entity to ORM model."""
        return NotificationModel(
            id=entity.id,
            user_id=entity.user_id,
            title=entity.title,
            message=entity.message,
            type=entity.type.value,
            link=entity.link,
            course_id=entity.course_id,
            group_id=entity.group_id,
            sent_by_id=entity.sent_by_id,
            is_read=entity.is_read,
            read_at=entity.read_at,
            created_at=entity.created_at,
        )
