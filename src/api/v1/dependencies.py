"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from fastapi import Depends
from starlette.requests import HTTPConnection

from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.announcement_service import AnnouncementService
from domain.services.delivery_service import DeliveryService
from domain.services.event_notifier import EventNotifier
from domain.services.event_publisher import EventPublisher
from domain.services.notification_service import NotificationService
from domain.services.room_membership_service import RoomMembershipService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.realtime.registry import ConnectionRegistry


def get_uow_factory() -> Callable[[], IUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_notification_service() -> NotificationService:
    """Get Notification service instance."""
    return NotificationService(get_uow_factory())


def get_connection_registry(connection: HTTPConnection) -> ConnectionRegistry | None:
    """Registry created by the app lifespan; None when the lifespan has not run."""
    return getattr(connection.app.state, "connection_registry", None)


def get_event_publisher(
    registry: ConnectionRegistry | None = Depends(get_connection_registry),
) -> EventPublisher:
    """Get an Event publisher bound to this process's registry."""
    return EventPublisher(registry)


def get_delivery_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
    notification_service: NotificationService = Depends(get_notification_service),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> DeliveryService:
    """Get Delivery service instance."""
    return DeliveryService(uow_factory, notification_service, publisher)


def get_event_notifier(
    delivery_service: DeliveryService = Depends(get_delivery_service),
) -> EventNotifier:
    """Get the Event notifier used by other platform producers."""
    return EventNotifier(delivery_service)


def get_announcement_service(
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
    delivery_service: DeliveryService = Depends(get_delivery_service),
) -> AnnouncementService:
    """Get Announcement service instance."""
    return AnnouncementService(uow_factory, delivery_service)


def get_room_membership_service(
    connection: HTTPConnection,
    uow_factory: Callable[[], IUnitOfWork] = Depends(get_uow_factory),
) -> RoomMembershipService:
    """Get the Room membership service for a websocket.

    Raises:
        RuntimeError: The app lifespan did not create a registry.
    """
    registry = get_connection_registry(connection)
    if registry is None:
        raise RuntimeError("Connection registry not initialized. Is the lifespan running?")
    return RoomMembershipService(registry, uow_factory)
