"""create user_accounts

Revision ID: 7f3b1c9d2a41
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '7f3b1c9d2a41'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user_accounts',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('username', sa.String(length=254), nullable=False),
        sa.Column('password_hash', sa.String(length=254), nullable=False),
        sa.Column('roles', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_user_accounts')),
        sa.UniqueConstraint('username', name='uq_user_accounts_username'),
    )


def downgrade():
    op.drop_table('user_accounts')
