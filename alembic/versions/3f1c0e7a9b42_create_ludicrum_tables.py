"""Create users, events and event_reviews

Revision ID: 3f1c0e7a9b42
Revises:
Create Date: 2026-10-19 10:12:41.503217

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c0e7a9b42'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=255), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('image', sa.String(length=1024), nullable=True),
    )

    op.create_table(
        'events',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(length=64), nullable=False),
        sa.Column('description', sa.String(length=512), nullable=False),
        sa.Column('lat', sa.String(length=32), nullable=False),
        sa.Column('lng', sa.String(length=32), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('date_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('user_id', sa.String(length=255),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('review_code', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('date_end >= date', name='ck_events_date_order'),
        # One hosted event per user; NULL hosts never collide
        sa.UniqueConstraint('user_id', name='uq_events_user_id'),
    )
    op.create_index('ix_events_date_end', 'events', ['date_end'])
    op.create_index('ix_events_created_at', 'events', ['created_at'])

    op.create_table(
        'event_reviews',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('event_id', sa.Uuid(),
                  sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(length=255),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('body', sa.String(length=256), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('user_id', 'event_id', name='uq_event_reviews_user_event'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_event_reviews_rating'),
    )
    op.create_index('ix_event_reviews_event_id', 'event_reviews', ['event_id'])


def downgrade():
    op.drop_index('ix_event_reviews_event_id', 'event_reviews')
    op.drop_table('event_reviews')
    op.drop_index('ix_events_created_at', 'events')
    op.drop_index('ix_events_date_end', 'events')
    op.drop_table('events')
    op.drop_table('users')
