"""Create admins table.

Revision ID: 001_admins
Revises:
Create Date: 2026-10-19

Email is unique only among rows where is_deleted is false.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_admins'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'admins',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('username', sa.String(256), nullable=False),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('password_hash', sa.String(128), nullable=True),
        sa.Column('first_name', sa.String(128), nullable=True),
        sa.Column('last_name', sa.String(128), nullable=True),
        sa.Column('picture_url', sa.String(1024), nullable=True),
        sa.Column('role', sa.String(32), nullable=False, server_default='admin'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_admins_email', 'admins', ['email'])
    op.create_index('ix_admins_is_deleted', 'admins', ['is_deleted'])
    op.create_index(
        'uq_admins_email_live',
        'admins',
        ['email'],
        unique=True,
        sqlite_where=sa.text('NOT is_deleted'),
        postgresql_where=sa.text('NOT is_deleted'),
    )


def downgrade() -> None:
    op.drop_index('uq_admins_email_live', table_name='admins')
    op.drop_index('ix_admins_is_deleted', table_name='admins')
    op.drop_index('ix_admins_email', table_name='admins')
    op.drop_table('admins')
