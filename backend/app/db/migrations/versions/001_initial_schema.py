"""Initial schema migration

Revision ID: 001
Revises:
Create Date: 2025-01-15 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('is_superadmin', sa.Boolean(), default=False),
        *_timestamps(),
    )

    # Organizations table
    op.create_table(
        'organizations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False, unique=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )

    # Org memberships table
    op.create_table(
        'org_memberships',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('organization_id', sa.Integer(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('role', sa.Enum('owner', 'admin', 'member', 'viewer', name='orgmembershiprole'), nullable=False, index=True),
        sa.Column('is_active', sa.Boolean(), default=True),
        *_timestamps(),
        sa.UniqueConstraint('organization_id', 'user_id', name='uq_org_memberships_org_user'),
    )

    # Meetings table
    op.create_table(
        'meetings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('organization_id', sa.Integer(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(300), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('meeting_type', sa.Enum('board', 'committee', 'special', 'annual', name='meetingtype'), nullable=False),
        sa.Column('meeting_date', sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column('location', sa.String(300), nullable=True),
        sa.Column('virtual_url', sa.String(500), nullable=True),
        sa.Column('status', sa.Enum('scheduled', 'completed', 'cancelled', 'archived', name='meetingstatus'), nullable=False, index=True),
        sa.Column('quorum_required', sa.Integer(), nullable=True),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )

    # Agenda items table
    op.create_table(
        'agenda_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('meeting_id', sa.Integer(), sa.ForeignKey('meetings.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(300), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('item_type', sa.Enum(
            'call_to_order', 'approval_of_minutes', 'discussion', 'vote', 'report',
            'presentation', 'new_business', 'adjournment', 'action_item',
            name='agendaitemtype'
        ), nullable=False),
        sa.Column('presenter_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('time_allocated', sa.Integer(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, default=0, index=True),
        *_timestamps(),
    )

    # Meeting minutes table
    op.create_table(
        'meeting_minutes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('meeting_id', sa.Integer(), sa.ForeignKey('meetings.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('status', sa.Enum('draft', 'approved', name='minutesstatus'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, default=1),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    # Tasks table
    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('organization_id', sa.Integer(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('title', sa.String(300), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('assigned_to_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('priority', sa.Enum('low', 'medium', 'high', 'urgent', name='taskpriority'), nullable=False),
        sa.Column('status', sa.Enum('not_started', 'in_progress', 'completed', 'cancelled', name='taskstatus'), nullable=False, index=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('source_type', sa.String(50), nullable=True),
        sa.Column('meeting_id', sa.Integer(), sa.ForeignKey('meetings.id', ondelete='SET NULL'), nullable=True, index=True),
        *_timestamps(),
    )

    # Task comments table
    op.create_table(
        'task_comments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('task_id', sa.Integer(), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('comment', sa.Text(), nullable=False),
        *_timestamps(),
    )

    # Documents table
    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('organization_id', sa.Integer(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('file_type', sa.Enum('document', 'spreadsheet', 'presentation', 'image', 'other', name='documentfiletype'), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False, default=0),
        sa.Column('file_url', sa.String(500), nullable=False),
        sa.Column('is_public', sa.Boolean(), default=False, index=True),
        sa.Column('uploaded_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )

    # Document shares table
    op.create_table(
        'document_shares',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('document_id', sa.Integer(), sa.ForeignKey('documents.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('organization_id', sa.Integer(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('share_token', sa.String(64), nullable=False, unique=True, index=True),
        sa.Column('share_name', sa.String(255), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('require_email', sa.Boolean(), default=False),
        sa.Column('require_tos_acceptance', sa.Boolean(), default=False),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('max_downloads', sa.Integer(), nullable=True),
        sa.Column('current_downloads', sa.Integer(), nullable=False, default=0),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('watermark_text', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )

    # Document access logs table
    op.create_table(
        'document_access_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('document_id', sa.Integer(), sa.ForeignKey('documents.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('share_id', sa.Integer(), sa.ForeignKey('document_shares.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('organization_id', sa.Integer(), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('access_type', sa.Enum('view', 'download', name='accesstype'), nullable=False),
        sa.Column('visitor_email', sa.String(255), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('accepted_tos', sa.Boolean(), default=False),
        sa.Column('accessed_at', sa.DateTime(timezone=True), nullable=False, index=True),
        *_timestamps(),
    )

    # Beta feedback table
    op.create_table(
        'beta_feedback',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('feedback_type', sa.Enum('bug', 'feature_request', 'improvement', 'question', 'other', name='feedbacktype'), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('screenshot_url', sa.String(500), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('browser', sa.String(50), nullable=True),
        sa.Column('os', sa.String(50), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, default='new'),
        sa.Column('priority', sa.Enum('low', 'medium', 'high', name='feedbackpriority'), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('beta_feedback')
    op.drop_table('document_access_logs')
    op.drop_table('document_shares')
    op.drop_table('documents')
    op.drop_table('task_comments')
    op.drop_table('tasks')
    op.drop_table('meeting_minutes')
    op.drop_table('agenda_items')
    op.drop_table('meetings')
    op.drop_table('org_memberships')
    op.drop_table('organizations')
    op.drop_table('users')

    # Drop enum types
    for enum_name in (
        'feedbackpriority', 'feedbacktype', 'accesstype', 'documentfiletype',
        'taskstatus', 'taskpriority', 'minutesstatus', 'agendaitemtype',
        'meetingstatus', 'meetingtype', 'orgmembershiprole',
    ):
        op.execute(f'DROP TYPE IF EXISTS {enum_name}')
