"""initial device and fault report schema

Revision ID: b7e1c04d9a21
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates:
- users: credential store (bcrypt hashes), role and department
- devices: maintained equipment, JSON attachment list, version_id for
  optimistic locking of attachment writes
- fault_reports: user-filed faults; device_id is a soft reference with no
  foreign key so reports survive device deletion
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b7e1c04d9a21'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='user'),
        sa.Column('department', sa.String(length=120), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_department', 'users', ['department'])

    op.create_table('devices',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('model', sa.String(length=255), nullable=False),
        sa.Column('serial_number', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('branch', sa.String(length=255), nullable=False),
        sa.Column('department', sa.String(length=120), nullable=True),
        sa.Column('status', sa.String(length=64), nullable=False),
        sa.Column('last_service_date', sa.Date(), nullable=True),
        sa.Column('next_service_date', sa.Date(), nullable=True),
        sa.Column('attachments', sa.JSON(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_devices_department', 'devices', ['department'])

    op.create_table('fault_reports',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('device_id', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='Open'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_fault_reports_user_id', 'fault_reports', ['user_id'])
    op.create_index('ix_fault_reports_device_id', 'fault_reports', ['device_id'])


def downgrade():
    """Drop all tables (destructive operation)."""
    op.drop_table('fault_reports')
    op.drop_table('devices')
    op.drop_table('users')
