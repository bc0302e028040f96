"""Unit tests for manual sends and broadcasts."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from core.exceptions import (
    InsufficientPermissionsError,
    NoRecipientsError,
    NotificationValidationError,
)
from domain.entities.notification import DeliveryResult, NotificationType
from domain.services.announcement_service import AnnouncementService
from domain.services.delivery_service import DeliveryService

ADMIN = ["ADMIN"]
INSTRUCTOR = ["INSTRUCTOR"]
STUDENT = ["STUDENT"]


@pytest.fixture
def delivery() -> AsyncMock:
    mock = AsyncMock(spec=DeliveryService)
    mock.deliver.return_value = DeliveryResult(recipient_count=1, notification_ids=[uuid4()])
    return mock


@pytest.fixture
def service(uow, delivery) -> AnnouncementService:
    return AnnouncementService(lambda: uow, delivery)


@pytest.fixture
def sender_id():
    return uuid4()


def _delivered_event(delivery: AsyncMock):
    return delivery.deliver.await_args.args[0]


class TestSendManualPermissions:
    async def test_student_cannot_send(self, service, sender_id, delivery):
        with pytest.raises(InsufficientPermissionsError):
            await service.send_manual(sender_id, STUDENT, "T", "M", user_ids=[uuid4()])

        delivery.deliver.assert_not_awaited()

    async def test_instructor_cannot_send_to_all(self, service, sender_id):
        with pytest.raises(InsufficientPermissionsError):
            await service.send_manual(sender_id, INSTRUCTOR, "T", "M", send_to_all=True)

    async def test_instructor_of_course_may_address_it(
        self, service, uow, delivery, sender_id, course_id
    ):
        uow.directory.get_course_instructor_id.return_value = sender_id

        await service.send_manual(sender_id, INSTRUCTOR, "T", "M", course_id=course_id)

        event = _delivered_event(delivery)
        assert event.course_id == course_id
        assert event.sent_by_id == sender_id

    async def test_other_instructor_may_not_address_course(
        self, service, uow, sender_id, course_id
    ):
        uow.directory.get_course_instructor_id.return_value = uuid4()

        with pytest.raises(InsufficientPermissionsError):
            await service.send_manual(sender_id, INSTRUCTOR, "T", "M", course_id=course_id)

    async def test_group_sender_must_teach_its_course(
        self, service, uow, delivery, sender_id, group_id, course_id
    ):
        uow.directory.get_group_course_id.return_value = course_id
        uow.directory.get_course_instructor_id.return_value = sender_id

        await service.send_manual(sender_id, INSTRUCTOR, "T", "M", group_id=group_id)

        assert _delivered_event(delivery).group_id == group_id

    async def test_unknown_group_is_refused(self, service, uow, sender_id, group_id):
        uow.directory.get_group_course_id.return_value = None

        with pytest.raises(InsufficientPermissionsError):
            await service.send_manual(sender_id, INSTRUCTOR, "T", "M", group_id=group_id)

    async def test_admin_skips_ownership_checks(
        self, service, uow, delivery, sender_id, course_id
    ):
        await service.send_manual(sender_id, ADMIN, "T", "M", course_id=course_id)

        uow.directory.get_course_instructor_id.assert_not_awaited()
        delivery.deliver.assert_awaited_once()


class TestSendManualTargets:
    async def test_sender_is_dropped_from_explicit_list(self, service, delivery, sender_id):
        other = uuid4()

        await service.send_manual(
            sender_id, INSTRUCTOR, "T", "M", user_ids=[sender_id, other, other]
        )

        assert _delivered_event(delivery).user_ids == (other,)

    async def test_only_sender_in_list_has_no_recipients(self, service, delivery, sender_id):
        with pytest.raises(NoRecipientsError):
            await service.send_manual(sender_id, INSTRUCTOR, "T", "M", user_ids=[sender_id])

        delivery.deliver.assert_not_awaited()

    async def test_send_to_all_is_a_broadcast(self, service, delivery, sender_id):
        await service.send_manual(
            sender_id, ADMIN, "T", "M", type=NotificationType.WARNING, send_to_all=True
        )

        event = _delivered_event(delivery)
        assert event.broadcast is True
        assert event.type == NotificationType.WARNING
        assert event.exclude_user_ids == (sender_id,)

    async def test_sender_is_excluded_from_group_send(
        self, service, uow, delivery, sender_id, group_id, course_id
    ):
        uow.directory.get_group_course_id.return_value = course_id
        uow.directory.get_course_instructor_id.return_value = sender_id

        await service.send_manual(sender_id, INSTRUCTOR, "T", "M", group_id=group_id)

        assert _delivered_event(delivery).exclude_user_ids == (sender_id,)

    async def test_no_target_is_invalid(self, service, sender_id):
        with pytest.raises(NotificationValidationError):
            await service.send_manual(sender_id, ADMIN, "T", "M")

    async def test_empty_resolution_raises(self, service, delivery, sender_id, course_id):
        delivery.deliver.return_value = DeliveryResult(recipient_count=0)

        with pytest.raises(NoRecipientsError):
            await service.send_manual(sender_id, ADMIN, "T", "M", course_id=course_id)


class TestBroadcast:
    async def test_admin_broadcast(self, service, delivery, sender_id):
        delivery.deliver.return_value = DeliveryResult(recipient_count=3)

        result = await service.broadcast(sender_id, ["SUPERADMIN"], "T", "M")

        assert result.recipient_count == 3
        event = _delivered_event(delivery)
        assert event.broadcast is True
        assert event.type == NotificationType.ANNOUNCEMENT

    async def test_instructor_cannot_broadcast(self, service, delivery, sender_id):
        with pytest.raises(InsufficientPermissionsError):
            await service.broadcast(sender_id, INSTRUCTOR, "T", "M")

        delivery.deliver.assert_not_awaited()
