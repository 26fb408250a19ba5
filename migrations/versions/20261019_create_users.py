"""Create users table

Revision ID: 20261019_create_users
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_create_users'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('address', sa.String(length=300), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=False),
        sa.Column('dob', sa.String(length=10), nullable=False),
        sa.Column('occupation', sa.String(length=200), nullable=False),
        sa.Column('interests', sa.JSON(), nullable=False),
        sa.Column('newsletter', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('country', sa.String(length=10), nullable=False),
        sa.Column('qr_code_url', sa.Text(), nullable=True),
        sa.Column('no_of_times_scanned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_created_at', 'users', ['created_at'])


def downgrade():
    op.drop_index('ix_users_created_at', table_name='users')
    op.drop_table('users')
