"""create_users_and_aux_sessions

Revision ID: 3c9e1a7b5d20
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '3c9e1a7b5d20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False, server_default=''),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='employee'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_is_active'), 'users', ['is_active'], unique=False)

    op.create_table(
        'aux_sessions',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('notes', sa.String(1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            'end_time IS NULL OR end_time >= start_time',
            name='ck_aux_sessions_end_after_start',
        ),
    )
    op.create_index(op.f('ix_aux_sessions_user_id'), 'aux_sessions', ['user_id'], unique=False)
    op.create_index(op.f('ix_aux_sessions_status'), 'aux_sessions', ['status'], unique=False)
    op.create_index(op.f('ix_aux_sessions_start_time'), 'aux_sessions', ['start_time'], unique=False)
    op.create_index(
        'ix_aux_sessions_user_start', 'aux_sessions', ['user_id', 'start_time'], unique=False
    )

    # At most one open session per user
    op.create_index(
        'uq_aux_sessions_one_open_per_user',
        'aux_sessions',
        ['user_id'],
        unique=True,
        postgresql_where=sa.text('end_time IS NULL'),
        sqlite_where=sa.text('end_time IS NULL'),
    )


def downgrade() -> None:
    op.drop_index('uq_aux_sessions_one_open_per_user', table_name='aux_sessions')
    op.drop_index('ix_aux_sessions_user_start', table_name='aux_sessions')
    op.drop_index(op.f('ix_aux_sessions_start_time'), table_name='aux_sessions')
    op.drop_index(op.f('ix_aux_sessions_status'), table_name='aux_sessions')
    op.drop_index(op.f('ix_aux_sessions_user_id'), table_name='aux_sessions')
    op.drop_table('aux_sessions')

    op.drop_index(op.f('ix_users_is_active'), table_name='users')
    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
