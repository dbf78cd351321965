"""Create churches, members, events, event_checklists and service_scales

Revision ID: 3b9e41c7d2a0
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b9e41c7d2a0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'churches',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'members',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('church_id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_members_church_id', 'members', ['church_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('church_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.Time(), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('responsible_id', sa.UUID(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('estimated_attendees', sa.Integer(), nullable=True),
        sa.Column('actual_attendees', sa.Integer(), nullable=True),
        sa.Column('registration_fee', sa.Numeric(10, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('estimated_attendees IS NULL OR estimated_attendees >= 0', name='ck_events_estimated_nonneg'),
        sa.CheckConstraint('actual_attendees IS NULL OR actual_attendees >= 0', name='ck_events_actual_nonneg'),
        sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_events_church_id', 'events', ['church_id'])
    op.create_index('idx_events_church_date', 'events', ['church_id', 'date'])

    op.create_table(
        'event_checklists',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('event_id', sa.UUID(), nullable=False),
        sa.Column('task', sa.String(), nullable=False),
        sa.Column('responsible_id', sa.UUID(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_event_checklists_event_id', 'event_checklists', ['event_id'])

    op.create_table(
        'service_scales',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('event_id', sa.UUID(), nullable=False),
        sa.Column('member_id', sa.UUID(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('confirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('declined', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        sa.Column('public_token', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('NOT (confirmed AND declined)', name='ck_service_scales_single_outcome'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('public_token')
    )
    op.create_index('ix_service_scales_event_id', 'service_scales', ['event_id'])


def downgrade() -> None:
    op.drop_index('ix_service_scales_event_id', table_name='service_scales')
    op.drop_table('service_scales')

    op.drop_index('ix_event_checklists_event_id', table_name='event_checklists')
    op.drop_table('event_checklists')

    op.drop_index('idx_events_church_date', table_name='events')
    op.drop_index('ix_events_church_id', table_name='events')
    op.drop_table('events')

    op.drop_index('idx_members_church_id', table_name='members')
    op.drop_table('members')

    op.drop_table('churches')
