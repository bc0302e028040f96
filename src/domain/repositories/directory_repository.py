"""Directory repository protocol.

Read-only lookups into the user, course, enrollment and group tables that
notification delivery needs for recipient resolution and permission checks.
"""

from typing import Protocol
from uuid import UUID


class IDirectoryRepository(Protocol):
    """Repository interface for recipient and membership lookups."""

    async def list_member_user_ids(self, group_id: UUID) -> list[UUID]:
        """User IDs of every member of a course group."""
        ...

    async def list_approved_enrollee_user_ids(self, course_id: UUID) -> list[UUID]:
        """User IDs with an approved enrollment in the course."""
        ...

    async def list_all_user_ids(self) -> list[UUID]:
        """User IDs of every active, non-banned user."""
        ...

    async def is_group_member(self, group_id: UUID, user_id: UUID) -> bool:
        """Check whether a user belongs to a course group."""
        ...

    async def is_approved_enrollee(self, course_id: UUID, user_id: UUID) -> bool:
        """Check whether a user has an approved enrollment in a course."""
        ...

    async def get_course_instructor_id(self, course_id: UUID) -> UUID | None:
        """Instructor of a course, or None when the course does not exist."""
        ...

    async def get_group_course_id(self, group_id: UUID) -> UUID | None:
        """Course a group belongs to, or None when the group does not exist."""
        ...
