"""Manual announcements sent by admins and instructors."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import (
    InsufficientPermissionsError,
    NoRecipientsError,
    NotificationValidationError,
)
from domain.entities.directory import can_announce, is_admin
from domain.entities.notification import (
    DeliveryResult,
    NotificationEvent,
    NotificationType,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.delivery_service import DeliveryService

logger = structlog.get_logger()


class AnnouncementService:
    """Permission checks for manual sends before handing off to delivery."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        delivery_service: DeliveryService,
    ) -> None:
        self._uow_factory = uow_factory
        self._delivery = delivery_service

    async def send_manual(
        self,
        sender_id: UUID,
        sender_roles: list[str],
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        link: str | None = None,
        user_ids: list[UUID] | None = None,
        course_id: UUID | None = None,
        group_id: UUID | None = None,
        send_to_all: bool = False,
    ) -> DeliveryResult:
        """Send to everyone, explicit users, a group, or a course's enrollees.

        Target precedence: ``send_to_all`` > ``user_ids`` > ``group_id`` >
        ``course_id``. The sender is left out of every target.

        Raises:
            InsufficientPermissionsError: The sender may not address this target.
            NotificationValidationError: No target given.
            NoRecipientsError: The target resolved to nobody.
        """
        if not can_announce(sender_roles):
            raise InsufficientPermissionsError("instructor")

        if send_to_all:
            if not is_admin(sender_roles):
                raise InsufficientPermissionsError("admin")
            event = NotificationEvent(
                title=title,
                message=message,
                type=type,
                link=link,
                broadcast=True,
                sent_by_id=sender_id,
                exclude_user_ids=(sender_id,),
            )
        elif user_ids:
            # The sender never receives their own announcement.
            targets = tuple(uid for uid in dict.fromkeys(user_ids) if uid != sender_id)
            if not targets:
                raise NoRecipientsError()
            event = NotificationEvent(
                title=title,
                message=message,
                type=type,
                link=link,
                user_ids=targets,
                course_id=course_id,
                group_id=group_id,
                sent_by_id=sender_id,
                exclude_user_ids=(sender_id,),
            )
        elif group_id is not None:
            await self._require_group_sender(sender_id, sender_roles, group_id)
            event = NotificationEvent(
                title=title,
                message=message,
                type=type,
                link=link,
                group_id=group_id,
                sent_by_id=sender_id,
                exclude_user_ids=(sender_id,),
            )
        elif course_id is not None:
            await self._require_course_sender(sender_id, sender_roles, course_id)
            event = NotificationEvent(
                title=title,
                message=message,
                type=type,
                link=link,
                course_id=course_id,
                sent_by_id=sender_id,
                exclude_user_ids=(sender_id,),
            )
        else:
            raise NotificationValidationError("Recipients were not specified")

        result = await self._delivery.deliver(event)
        if result.recipient_count == 0:
            raise NoRecipientsError()

        logger.info(
            "announcement_sent",
            sender_id=str(sender_id),
            recipient_count=result.recipient_count,
        )
        return result

    async def broadcast(
        self,
        sender_id: UUID,
        sender_roles: list[str],
        title: str,
        message: str,
        type: NotificationType = NotificationType.ANNOUNCEMENT,
        link: str | None = None,
    ) -> DeliveryResult:
        """Admin broadcast: one row per user plus a global live push."""
        if not is_admin(sender_roles):
            raise InsufficientPermissionsError("admin")
        return await self._delivery.deliver(
            NotificationEvent(
                title=title,
                message=message,
                type=type,
                link=link,
                broadcast=True,
                sent_by_id=sender_id,
            )
        )

    # --- Permission helpers ---

    async def _require_course_sender(
        self, sender_id: UUID, sender_roles: list[str], course_id: UUID
    ) -> None:
        if is_admin(sender_roles):
            return
        async with self._uow_factory() as uow:
            instructor_id = await uow.directory.get_course_instructor_id(course_id)
        if instructor_id != sender_id:
            raise InsufficientPermissionsError("course instructor")

    async def _require_group_sender(
        self, sender_id: UUID, sender_roles: list[str], group_id: UUID
    ) -> None:
        if is_admin(sender_roles):
            return
        async with self._uow_factory() as uow:
            course_id = await uow.directory.get_group_course_id(group_id)
            instructor_id = (
                await uow.directory.get_course_instructor_id(course_id)
                if course_id is not None
                else None
            )
        if instructor_id is None or instructor_id != sender_id:
            raise InsufficientPermissionsError("course instructor")
