"""SQLAlchemy implementation of Directory repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.directory import EnrollmentStatus
from infrastructure.database.models import (
    CourseGroupMemberModel,
    CourseGroupModel,
    CourseModel,
    EnrollmentModel,
    ProfileModel,
)


class SQLAlchemyDirectoryRepository:
    """SQLAlchemy implementation of IDirectoryRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_member_user_ids(self, group_id: UUID) -> list[UUID]:
        """User IDs of every member of a course group."""
        stmt = select(CourseGroupMemberModel.user_id).where(
            CourseGroupMemberModel.group_id == group_id
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def list_approved_enrollee_user_ids(self, course_id: UUID) -> list[UUID]:
        """User IDs with an approved enrollment in the course."""
        stmt = select(EnrollmentModel.user_id).where(
            EnrollmentModel.course_id == course_id,
            EnrollmentModel.status == EnrollmentStatus.APPROVED.value,
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def list_all_user_ids(self) -> list[UUID]:
        """User IDs of every active, non-banned user."""
        stmt = (
            select(ProfileModel.id)
            .where(
                ProfileModel.is_active.is_(True),
                ProfileModel.is_banned.is_(False),
            )
            .order_by(ProfileModel.created_at)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def is_group_member(self, group_id: UUID, user_id: UUID) -> bool:
        """Check whether a user belongs to a course group."""
        stmt = select(CourseGroupMemberModel.id).where(
            CourseGroupMemberModel.group_id == group_id,
            CourseGroupMemberModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def is_approved_enrollee(self, course_id: UUID, user_id: UUID) -> bool:
        """Check whether a user has an approved enrollment in a course."""
        stmt = select(EnrollmentModel.id).where(
            EnrollmentModel.course_id == course_id,
            EnrollmentModel.user_id == user_id,
            EnrollmentModel.status == EnrollmentStatus.APPROVED.value,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_course_instructor_id(self, course_id: UUID) -> UUID | None:
        """Instructor of a course, or None when the course does not exist."""
        stmt = select(CourseModel.instructor_id).where(CourseModel.id == course_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_group_course_id(self, group_id: UUID) -> UUID | None:
        """Course a group belongs to, or None when the group does not exist."""
        stmt = select(CourseGroupModel.course_id).where(CourseGroupModel.id == group_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
