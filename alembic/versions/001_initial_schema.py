"""Initial schema: user sessions and subscriber identities

Revision ID: 001
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _has_table(name: str) -> bool:
    bind = op.get_bind()
    insp = sa.inspect(bind)
    return name in insp.get_table_names()


def upgrade():
    # Guarded so databases bootstrapped by create_all (SQLite dev) can be stamped forward
    if not _has_table('user_sessions'):
        op.create_table(
            'user_sessions',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('user_id', sa.String(128), nullable=False),
            sa.Column('device_id', sa.String(255), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )
        op.create_index('uq_user_sessions_user_id', 'user_sessions', ['user_id'], unique=True)

    if not _has_table('subscriber_identities'):
        op.create_table(
            'subscriber_identities',
            sa.Column('subscriber_id', sa.String(11), primary_key=True),
            sa.Column('masked_id', sa.String(512), nullable=False),
            sa.Column('owner_user_id', sa.String(128), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index(
            'idx_subscriber_identity_owner',
            'subscriber_identities',
            ['owner_user_id', 'created_at'],
        )


def downgrade():
    if _has_table('subscriber_identities'):
        op.drop_index('idx_subscriber_identity_owner', table_name='subscriber_identities')
        op.drop_table('subscriber_identities')
    if _has_table('user_sessions'):
        op.drop_index('uq_user_sessions_user_id', table_name='user_sessions')
        op.drop_table('user_sessions')
