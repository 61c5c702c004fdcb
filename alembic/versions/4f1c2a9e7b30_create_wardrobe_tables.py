"""create_wardrobe_tables

Revision ID: 4f1c2a9e7b30
Revises:
Create Date: 2026-10-19 10:12:44.381920

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column(
            'outfit_generator_mode',
            sa.String(length=10),
            server_default='heuristic',
            nullable=False,
            comment='Outfit generator mode (heuristic, ai)',
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'clothes',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=False, comment='URL to item image'),
        sa.Column('type', sa.String(length=20), nullable=False, comment='Item category (top, bottom, shoes, ...)'),
        sa.Column('color', sa.String(length=50), nullable=True),
        sa.Column('season', sa.String(length=10), nullable=True),
        sa.Column('size', sa.String(length=20), nullable=True),
        sa.Column('material', sa.String(length=100), nullable=True),
        sa.Column('style', sa.String(length=20), nullable=True),
        sa.Column('brand', sa.String(length=100), nullable=True),
        sa.Column('model', sa.String(length=100), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True, comment="List of tags / occasions (e.g., ['party', 'summer'])"),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_clothes_user_id', 'clothes', ['user_id'])
    op.create_index('ix_clothes_user_type', 'clothes', ['user_id', 'type'])

    op.create_table(
        'events',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('event_date', sa.Date(), nullable=False),
        sa.Column('event_time', sa.String(length=5), nullable=False, comment='Start time (HH:MM)'),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('event_type', sa.String(length=10), nullable=False, comment='casual, formal, sport, party'),
        sa.Column('icon', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False, comment='generate, preparing, ready'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_events_user_id', 'events', ['user_id'])
    op.create_index('ix_events_user_date', 'events', ['user_id', 'event_date'])

    op.create_table(
        'outfit_suggestions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('clothes_ids', sa.JSON(), nullable=False),
        sa.Column('suggestion_date', sa.Date(), nullable=False),
        sa.Column('context', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_outfit_suggestions_user_id', 'outfit_suggestions', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_outfit_suggestions_user_id', table_name='outfit_suggestions')
    op.drop_table('outfit_suggestions')
    op.drop_index('ix_events_user_date', table_name='events')
    op.drop_index('ix_events_user_id', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_clothes_user_type', table_name='clothes')
    op.drop_index('ix_clothes_user_id', table_name='clothes')
    op.drop_table('clothes')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
