"""Directory roles and enrollment statuses."""

from enum import Enum

ADMIN_ROLES = frozenset({"ADMIN", "SUPERADMIN", "SUPER_ADMIN"})
INSTRUCTOR_ROLE = "INSTRUCTOR"


class EnrollmentStatus(str, Enum):
    """Enrollment review status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


def is_admin(roles: list[str] | None) -> bool:
    """Check whether any of the given role names grants admin access."""
    return any(role.upper() in ADMIN_ROLES for role in roles or ())


def can_announce(roles: list[str] | None) -> bool:
    """Admins and instructors may send manual announcements."""
    return is_admin(roles) or any(role.upper() == INSTRUCTOR_ROLE for role in roles or ())
