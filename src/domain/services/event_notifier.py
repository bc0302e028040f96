"""Canned notifications raised by domain events elsewhere on the platform."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from domain.entities.notification import (
    DeliveryResult,
    NotificationEvent,
    NotificationType,
)
from domain.services.delivery_service import DeliveryService

OrderStatus = Literal["PAID", "SHIPPED", "DELIVERED", "CANCELLED", "REFUNDED"]
EnrollmentDecision = Literal["APPROVED", "PENDING", "REJECTED"]

ORDER_TITLES: dict[str, str] = {
    "PAID": "Payment received",
    "SHIPPED": "Your order has shipped",
    "DELIVERED": "Your order was delivered",
    "CANCELLED": "Your order was cancelled",
    "REFUNDED": "Your order was refunded",
}

ENROLLMENT_TITLES: dict[str, str] = {
    "APPROVED": "Enrollment approved",
    "PENDING": "Enrollment request sent",
    "REJECTED": "Enrollment request declined",
}

ENROLLMENT_MESSAGES: dict[str, str] = {
    "APPROVED": "Congratulations! You now have access to the course content.",
    "PENDING": "Your request was sent. Please wait for the instructor to review it.",
    "REJECTED": "Unfortunately your enrollment request was not approved.",
}


class EventNotifier:
    """One method per domain event; each ends in a single ``deliver`` call."""

    def __init__(self, delivery_service: DeliveryService) -> None:
        self._delivery = delivery_service

    async def order_status_changed(
        self, user_id: UUID, order_id: UUID | str, status: OrderStatus
    ) -> DeliveryResult:
        title = ORDER_TITLES[status]
        return await self._delivery.deliver(
            NotificationEvent(
                title=title,
                message=f'Order #{order_id} is now "{title}".',
                type=NotificationType.PAYMENT,
                link=f"/dashboard/orders/{order_id}",
                user_ids=(user_id,),
            )
        )

    async def enrollment_status_changed(
        self, user_id: UUID, course_id: UUID, status: EnrollmentDecision
    ) -> DeliveryResult:
        return await self._delivery.deliver(
            NotificationEvent(
                title=ENROLLMENT_TITLES[status],
                message=ENROLLMENT_MESSAGES[status],
                type=NotificationType.ENROLLMENT,
                link=f"/dashboard/courses/{course_id}",
                user_ids=(user_id,),
                course_id=course_id,
            )
        )

    async def certificate_issued(self, user_id: UUID, course_id: UUID) -> DeliveryResult:
        return await self._delivery.deliver(
            NotificationEvent(
                title="New certificate issued",
                message=(
                    "Congratulations! Your course certificate is ready to "
                    "download and share."
                ),
                type=NotificationType.CERTIFICATE,
                link=f"/dashboard/courses/{course_id}/certificate",
                user_ids=(user_id,),
                course_id=course_id,
            )
        )

    async def grade_assigned(
        self,
        user_id: UUID,
        course_id: UUID,
        category_title: str,
        score: float,
        max_score: float,
        graded_by_id: UUID,
        feedback: str | None = None,
        is_exam: bool = False,
    ) -> DeliveryResult:
        message = f"{category_title}\nScore: {score:g} of {max_score:g}"
        if feedback:
            message += f"\n\nFeedback: {feedback}"
        return await self._delivery.deliver(
            NotificationEvent(
                title="Your exam was graded" if is_exam else "You received a new grade",
                message=message,
                type=NotificationType.EXAM if is_exam else NotificationType.ASSIGNMENT,
                link=f"/dashboard/courses/{course_id}/grades",
                user_ids=(user_id,),
                course_id=course_id,
                sent_by_id=graded_by_id,
            )
        )

    async def live_class_starting(
        self,
        course_id: UUID,
        session_id: UUID,
        title: str,
        starts_at: datetime,
        meet_link: str | None = None,
    ) -> DeliveryResult:
        """Notify the course's enrollees; the live push goes to the course room."""
        message = f'Class "{title}" starts at {starts_at:%H:%M}.'
        if meet_link:
            message += f"\nJoin link: {meet_link}"
        return await self._delivery.deliver(
            NotificationEvent(
                title="Live class is starting",
                message=message,
                type=NotificationType.LIVE_CLASS,
                link=meet_link or f"/dashboard/courses/{course_id}/sessions/{session_id}",
                course_id=course_id,
            )
        )

    async def ticket_replied(self, user_id: UUID, ticket_id: UUID | str) -> DeliveryResult:
        return await self._delivery.deliver(
            NotificationEvent(
                title="New reply to your ticket",
                message="Support replied to your ticket. Please take a look.",
                type=NotificationType.SUPPORT,
                link=f"/dashboard/tickets/{ticket_id}",
                user_ids=(user_id,),
            )
        )

    async def welcome(self, user_id: UUID) -> DeliveryResult:
        return await self._delivery.deliver(
            NotificationEvent(
                title="Welcome aboard",
                message=(
                    "Your account is ready. Browse the catalog to find your "
                    "first course."
                ),
                type=NotificationType.SUCCESS,
                link="/dashboard",
                user_ids=(user_id,),
            )
        )

    async def password_changed(self, user_id: UUID) -> DeliveryResult:
        return await self._delivery.deliver(
            NotificationEvent(
                title="Password changed",
                message="Your account password was changed successfully.",
                type=NotificationType.INFO,
                user_ids=(user_id,),
            )
        )
