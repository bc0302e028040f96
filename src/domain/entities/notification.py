"""Notification domain entities and type constants."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

TITLE_MAX_LENGTH = 120
MESSAGE_MAX_LENGTH = 800


def utcnow() -> datetime:
    """Timezone-aware current time used for every notification timestamp."""
    return datetime.now(timezone.utc)


class NotificationType(str, Enum):
    """Notification categories.

    Uppercase members are canonical. The lowercase members are kept so that
    rows written by older producers still load.
    """

    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    ANNOUNCEMENT = "ANNOUNCEMENT"
    PAYMENT = "PAYMENT"
    ENROLLMENT = "ENROLLMENT"
    ASSIGNMENT = "ASSIGNMENT"
    EXAM = "EXAM"
    CERTIFICATE = "CERTIFICATE"
    LIVE_CLASS = "LIVE_CLASS"
    SUPPORT = "SUPPORT"
    SYSTEM = "SYSTEM"

    # Legacy lowercase variants
    LEGACY_SUCCESS = "success"
    LEGACY_INFO = "info"
    LEGACY_WARNING = "warning"
    LEGACY_ERROR = "error"
    LEGACY_ORDER = "order"
    LEGACY_PAYMENT = "payment"
    LEGACY_REVIEW = "review"
    LEGACY_MESSAGE = "message"
    LEGACY_SYSTEM = "system"


@dataclass
class Notification:
    """Durable per-recipient notification row."""

    user_id: UUID
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    id: UUID = field(default_factory=uuid4)
    link: str | None = None
    course_id: UUID | None = None
    group_id: UUID | None = None
    sent_by_id: UUID | None = None
    is_read: bool = False
    read_at: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True, slots=True)
class NotificationEvent:
    """Transient description of one logical notification and who it targets.

    Exactly one addressing style is used for recipient resolution, in the
    order ``user_ids`` > ``group_id`` > ``course_id`` > ``broadcast``.
    ``exclude_user_ids`` is removed from whatever that resolves to.
    """

    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    link: str | None = None
    user_ids: tuple[UUID, ...] = ()
    course_id: UUID | None = None
    group_id: UUID | None = None
    broadcast: bool = False
    sent_by_id: UUID | None = None
    exclude_user_ids: tuple[UUID, ...] = ()
    emitted_at: datetime = field(default_factory=utcnow)

    @property
    def has_target(self) -> bool:
        return bool(self.user_ids) or self.course_id is not None or (
            self.group_id is not None
        ) or self.broadcast


@dataclass(frozen=True, slots=True)
class NotificationPage:
    """Read-only value object: one page of a user's inbox."""

    items: list[Notification]
    total: int
    unread_count: int
    page: int
    page_size: int


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome of a delivery, reported back to the producer."""

    recipient_count: int
    notification_ids: list[UUID] = field(default_factory=list)
