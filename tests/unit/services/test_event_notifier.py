"""Unit tests for canned domain-event notifications."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from api.v1.dependencies import get_event_notifier
from domain.entities.notification import DeliveryResult, NotificationType
from domain.services.delivery_service import DeliveryService
from domain.services.event_notifier import EventNotifier


@pytest.fixture
def delivery() -> AsyncMock:
    mock = AsyncMock(spec=DeliveryService)
    mock.deliver.return_value = DeliveryResult(recipient_count=1)
    return mock


@pytest.fixture
def notifier(delivery) -> EventNotifier:
    return EventNotifier(delivery)


def _event(delivery: AsyncMock):
    delivery.deliver.assert_awaited_once()
    return delivery.deliver.await_args.args[0]


class TestEventNotifier:
    async def test_order_status(self, notifier, delivery, user_id):
        await notifier.order_status_changed(user_id, "A-100", "SHIPPED")

        event = _event(delivery)
        assert event.user_ids == (user_id,)
        assert event.type == NotificationType.PAYMENT
        assert "A-100" in event.message
        assert event.link == "/dashboard/orders/A-100"

    @pytest.mark.parametrize("status", ["APPROVED", "PENDING", "REJECTED"])
    async def test_enrollment_status(self, notifier, delivery, user_id, course_id, status):
        await notifier.enrollment_status_changed(user_id, course_id, status)

        event = _event(delivery)
        assert event.user_ids == (user_id,)
        assert event.course_id == course_id
        assert event.type == NotificationType.ENROLLMENT

    async def test_grade_includes_score_and_feedback(
        self, notifier, delivery, user_id, course_id
    ):
        grader = uuid4()

        await notifier.grade_assigned(
            user_id, course_id, "Midterm", 18, 20, grader, feedback="Nice", is_exam=True
        )

        event = _event(delivery)
        assert event.type == NotificationType.EXAM
        assert "18 of 20" in event.message
        assert "Nice" in event.message
        assert event.sent_by_id == grader

    async def test_live_class_targets_course(self, notifier, delivery, course_id):
        starts = datetime(2026, 3, 1, 14, 30, tzinfo=timezone.utc)

        await notifier.live_class_starting(course_id, uuid4(), "Algebra", starts)

        event = _event(delivery)
        assert event.course_id == course_id
        assert event.user_ids == ()
        assert "14:30" in event.message

    async def test_certificate(self, notifier, delivery, user_id, course_id):
        await notifier.certificate_issued(user_id, course_id)

        assert _event(delivery).type == NotificationType.CERTIFICATE

    async def test_ticket_reply(self, notifier, delivery, user_id):
        await notifier.ticket_replied(user_id, "T-9")

        event = _event(delivery)
        assert event.type == NotificationType.SUPPORT
        assert event.link == "/dashboard/tickets/T-9"

    async def test_welcome_and_password(self, notifier, delivery, user_id):
        await notifier.welcome(user_id)
        await notifier.password_changed(user_id)

        assert delivery.deliver.await_count == 2


class TestEventNotifierProvider:
    async def test_provider_delivers_through_given_service(self, delivery, user_id):
        notifier = get_event_notifier(delivery)
        await notifier.welcome(user_id)

        assert _event(delivery).user_ids == (user_id,)
