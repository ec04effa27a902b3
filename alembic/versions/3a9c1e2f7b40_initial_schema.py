"""initial schema

Revision ID: 3a9c1e2f7b40
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision: str = '3a9c1e2f7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TIMESTAMP = sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), 'mysql')
USER_ROLE = sa.Enum('user', 'admin', name='user_role')
USER_TIER = sa.Enum('registered', 'premium', 'custom', name='user_tier')
CHAT_ROLE = sa.Enum('user', 'assistant', 'system', name='chat_role')
REQUEST_TYPE = sa.Enum('text', 'image', name='request_type')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', TIMESTAMP, nullable=False),
        sa.Column('updated_at', TIMESTAMP, nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        *_timestamps(),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('hashed_password', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('role', USER_ROLE, nullable=False),
        sa.Column('tier', USER_TIER, nullable=False),
        sa.Column('tier_config', sa.JSON(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_tier', 'users', ['tier'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'refresh_tokens',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        *_timestamps(),
        sa.Column('jti', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('expires_at', TIMESTAMP, nullable=False),
    )
    op.create_index('ix_refresh_tokens_id', 'refresh_tokens', ['id'])
    op.create_index('ix_refresh_tokens_jti', 'refresh_tokens', ['jti'], unique=True)
    op.create_index('ix_refresh_tokens_user_id', 'refresh_tokens', ['user_id'])
    op.create_index('ix_refresh_tokens_created_at', 'refresh_tokens', ['created_at'])

    op.create_table(
        'chat_sessions',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        *_timestamps(),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('last_updated', TIMESTAMP, nullable=False),
    )
    op.create_index('ix_chat_sessions_id', 'chat_sessions', ['id'])
    op.create_index('ix_chat_sessions_user_id', 'chat_sessions', ['user_id'])
    op.create_index('ix_chat_sessions_last_updated', 'chat_sessions', ['last_updated'])
    op.create_index('ix_chat_sessions_created_at', 'chat_sessions', ['created_at'])

    op.create_table(
        'chat_messages',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        *_timestamps(),
        sa.Column('session_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('role', CHAT_ROLE, nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
    )
    op.create_index('ix_chat_messages_id', 'chat_messages', ['id'])
    op.create_index('ix_chat_messages_session_id', 'chat_messages', ['session_id'])
    op.create_index('ix_chat_messages_created_at', 'chat_messages', ['created_at'])

    op.create_table(
        'analytics',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), primary_key=True),
        *_timestamps(),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('provider', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('model', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('type', REQUEST_TYPE, nullable=False),
        sa.Column('cost', sa.Float(), nullable=False),
        sa.Column('tokens', sa.Integer(), nullable=False),
        sa.Column('prompt_tokens', sa.Integer(), nullable=False),
        sa.Column('completion_tokens', sa.Integer(), nullable=False),
        sa.Column('processing_time', sa.Float(), nullable=False),
        sa.Column('success', sa.Boolean(), nullable=False),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('user_tier', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('provider_details', sa.JSON(), nullable=True),
        sa.Column('request_size', sa.Integer(), nullable=True),
        sa.Column('response_size', sa.Integer(), nullable=True),
    )
    op.create_index('ix_analytics_id', 'analytics', ['id'])
    op.create_index('ix_analytics_user_id', 'analytics', ['user_id'])
    op.create_index('ix_analytics_provider', 'analytics', ['provider'])
    op.create_index('ix_analytics_model', 'analytics', ['model'])
    op.create_index('ix_analytics_user_tier', 'analytics', ['user_tier'])
    op.create_index('ix_analytics_created_at', 'analytics', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('analytics')
    op.drop_table('chat_messages')
    op.drop_table('chat_sessions')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
    for enum in (REQUEST_TYPE, CHAT_ROLE, USER_TIER, USER_ROLE):
        enum.drop(op.get_bind(), checkfirst=True)
