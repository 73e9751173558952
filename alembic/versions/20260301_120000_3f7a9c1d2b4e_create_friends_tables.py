"""Create user_profiles and friends tables

Revision ID: 3f7a9c1d2b4e
Revises:
Create Date: 2026-03-01 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f7a9c1d2b4e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'user_profiles',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('username', sa.String(30), nullable=True),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_user_profiles_username', 'user_profiles', ['username'], unique=True)

    op.create_table(
        'friends',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('requester_id', sa.String(64), sa.ForeignKey('user_profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('receiver_id', sa.String(64), sa.ForeignKey('user_profiles.id', ondelete='CASCADE'), nullable=False),
        # Sorted user pair, one row per unordered pair
        sa.Column('user_low', sa.String(64), nullable=False),
        sa.Column('user_high', sa.String(64), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_low', 'user_high', name='unique_friend_pair'),
        sa.CheckConstraint('requester_id <> receiver_id', name='no_self_friendship'),
        sa.CheckConstraint("status IN ('pending', 'accepted', 'blocked')", name='valid_friend_status'),
    )
    op.create_index('ix_friends_requester_id', 'friends', ['requester_id'])
    op.create_index('ix_friends_receiver_id', 'friends', ['receiver_id'])
    op.create_index('ix_friends_created_at', 'friends', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_friends_created_at', table_name='friends')
    op.drop_index('ix_friends_receiver_id', table_name='friends')
    op.drop_index('ix_friends_requester_id', table_name='friends')
    op.drop_table('friends')
    op.drop_index('ix_user_profiles_username', table_name='user_profiles')
    op.drop_table('user_profiles')
