"""create_notification_schema

Revision ID: 4c1d7e2a9f30
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1d7e2a9f30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create directory tables and the per-recipient notifications table."""

    # --- directory ---
    op.create_table('profiles',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False,
                  server_default='true'),
        sa.Column('is_banned', sa.Boolean(), nullable=False,
                  server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('courses',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('instructor_id', sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(['instructor_id'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_courses_instructor_id', 'courses', ['instructor_id'])

    op.create_table('enrollments',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('course_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False,
                  server_default='PENDING'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'],
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('course_id', 'user_id'),
    )
    op.create_index('ix_enrollments_course_id', 'enrollments', ['course_id'])

    op.create_table('course_groups',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('course_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_course_groups_course_id', 'course_groups', ['course_id'])

    op.create_table('course_group_members',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('group_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(['group_id'], ['course_groups.id'],
                                ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('group_id', 'user_id'),
    )
    op.create_index('ix_course_group_members_group_id',
                    'course_group_members', ['group_id'])

    # --- notifications (one row per recipient) ---
    op.create_table('notifications',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=120), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False,
                  server_default='INFO'),
        sa.Column('link', sa.String(length=500), nullable=True),
        sa.Column('course_id', sa.UUID(), nullable=True),
        sa.Column('group_id', sa.UUID(), nullable=True),
        sa.Column('sent_by_id', sa.UUID(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False,
                  server_default='false'),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('NOW()')),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'],
                                ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_notifications_user_created',
                    'notifications', ['user_id', sa.text('created_at DESC')])
    op.create_index('idx_notifications_user_unread',
                    'notifications', ['user_id', 'is_read'])


def downgrade() -> None:
    """Drop everything created in upgrade()."""
    op.drop_index('idx_notifications_user_unread', table_name='notifications')
    op.drop_index('idx_notifications_user_created', table_name='notifications')
    op.drop_table('notifications')

    op.drop_index('ix_course_group_members_group_id',
                  table_name='course_group_members')
    op.drop_table('course_group_members')
    op.drop_index('ix_course_groups_course_id', table_name='course_groups')
    op.drop_table('course_groups')
    op.drop_index('ix_enrollments_course_id', table_name='enrollments')
    op.drop_table('enrollments')
    op.drop_index('ix_courses_instructor_id', table_name='courses')
    op.drop_table('courses')
    op.drop_table('profiles')
