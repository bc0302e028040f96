"""Delivery coordinator: persist notifications, then push them live."""

import dataclasses
from collections.abc import Callable
from uuid import UUID

import nh3
import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import NotificationValidationError, PersistenceError
from domain.entities.notification import (
    MESSAGE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    DeliveryResult,
    NotificationEvent,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.event_publisher import EventPublisher
from domain.services.notification_service import NotificationService

logger = structlog.get_logger()

ALLOWED_TAGS = {"b", "i", "em", "strong", "a", "br", "p"}
ALLOWED_ATTRIBUTES = {"a": {"href"}}
ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}


def sanitize_text(value: str | None) -> str:
    """Strip markup outside the inline allowlist and trim whitespace."""
    cleaned = nh3.clean(
        value or "",
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
    )
    return cleaned.strip()


def validate_event(event: NotificationEvent) -> NotificationEvent:
    """Reject malformed events and return a copy with sanitized text."""
    title = sanitize_text(event.title)
    message = sanitize_text(event.message)

    if not title:
        raise NotificationValidationError("Title is required", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        raise NotificationValidationError(
            f"Title must be at most {TITLE_MAX_LENGTH} characters", field="title"
        )
    if not message:
        raise NotificationValidationError("Message is required", field="message")
    if len(message) > MESSAGE_MAX_LENGTH:
        raise NotificationValidationError(
            f"Message must be at most {MESSAGE_MAX_LENGTH} characters", field="message"
        )
    if not event.has_target:
        raise NotificationValidationError("At least one recipient target is required")

    return dataclasses.replace(event, title=title, message=message)


class DeliveryService:
    """The single write entry point for notifications.

    Every producer goes through :meth:`deliver`, which always commits the
    durable rows before anything is pushed to live connections.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_service: NotificationService,
        publisher: EventPublisher,
    ) -> None:
        self._uow_factory = uow_factory
        self._store = notification_service
        self._publisher = publisher

    async def deliver(self, event: NotificationEvent) -> DeliveryResult:
        """Persist one row per resolved recipient, then push to the rooms.

        Raises:
            NotificationValidationError: Malformed event (nothing written).
            PersistenceError: Storage failed (nothing pushed).
        """
        event = validate_event(event)

        try:
            recipient_ids = await self._resolve_recipients(event)
            notification_ids = await self._persist(event, recipient_ids)
        except SQLAlchemyError as e:
            logger.error(
                "notification_persist_failed",
                title=event.title,
                error=str(e),
                exc_info=True,
            )
            raise PersistenceError() from e

        if not notification_ids:
            logger.info("notification_no_recipients", title=event.title)
            return DeliveryResult(recipient_count=0)

        await self._push(event, recipient_ids)

        logger.info(
            "notification_delivered",
            title=event.title,
            type=event.type.value,
            recipient_count=len(notification_ids),
        )
        return DeliveryResult(
            recipient_count=len(notification_ids),
            notification_ids=notification_ids,
        )

    async def _resolve_recipients(self, event: NotificationEvent) -> list[UUID]:
        """Turn the event's addressing into concrete, de-duplicated user IDs."""
        if event.user_ids:
            candidates = list(event.user_ids)
        else:
            async with self._uow_factory() as uow:
                if event.group_id is not None:
                    candidates = await uow.directory.list_member_user_ids(event.group_id)
                elif event.course_id is not None:
                    candidates = await uow.directory.list_approved_enrollee_user_ids(
                        event.course_id
                    )
                else:
                    candidates = await uow.directory.list_all_user_ids()

        excluded = set(event.exclude_user_ids)
        return [uid for uid in dict.fromkeys(candidates) if uid not in excluded]

    async def _persist(self, event: NotificationEvent, recipient_ids: list[UUID]) -> list[UUID]:
        """Write the rows chunk by chunk, committing each chunk.

        A failure part-way leaves earlier chunks stored; those recipients see
        the notification on their next inbox fetch.
        """
        created: list[UUID] = []
        size = self._store.batch_size
        for start in range(0, len(recipient_ids), size):
            chunk = recipient_ids[start:start + size]
            async with self._uow_factory() as uow:
                if len(chunk) == 1:
                    rows = [
                        await self._store.create_for_user(
                            uow,
                            chunk[0],
                            event.title,
                            event.message,
                            event.type,
                            link=event.link,
                            course_id=event.course_id,
                            group_id=event.group_id,
                            sent_by_id=event.sent_by_id,
                        )
                    ]
                else:
                    rows = await self._store.create_for_users(
                        uow,
                        chunk,
                        event.title,
                        event.message,
                        event.type,
                        link=event.link,
                        course_id=event.course_id,
                        group_id=event.group_id,
                        sent_by_id=event.sent_by_id,
                    )
                await uow.commit()
            created.extend(row.id for row in rows)
        return created

    async def _push(self, event: NotificationEvent, recipient_ids: list[UUID]) -> None:
        """Push with room-level targets; failures never reach the caller.

        Explicit users get their personal rooms, a group or course target gets
        its shared room, and a broadcast goes to every connection. Course and
        group rooms only admit members, so a room push stays within the
        persisted recipient set.
        """
        if event.user_ids:
            push_event = dataclasses.replace(
                event, user_ids=tuple(recipient_ids), course_id=None, group_id=None
            )
        elif event.group_id is not None:
            push_event = dataclasses.replace(event, course_id=None)
        else:
            push_event = event

        try:
            await self._publisher.publish(push_event)
        except Exception as e:
            logger.warning(
                "realtime_push_failed",
                title=event.title,
                error=str(e),
                exc_info=True,
            )
