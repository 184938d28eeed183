"""Create users and job_positions tables

Revision ID: 3f1a9c2b7d10
Revises:
Create Date: 2026-05-12 12:08:01.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1a9c2b7d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='staff_hr'),
        sa.Column('department', sa.String(length=255), nullable=True),
        sa.Column('avatar_object_key', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        # Managers must belong to a department
        sa.CheckConstraint(
            "role <> 'manager' OR department IS NOT NULL",
            name='ck_users_manager_department'
        ),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    # Status is a plain VARCHAR, not a database enum
    op.create_table(
        'job_positions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('registration_start_date', sa.DateTime(), nullable=True),
        sa.Column('registration_end_date', sa.DateTime(), nullable=True),
        sa.Column('specific_requirements', sa.Text(), nullable=True),
        sa.Column('available_slots', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('announcement', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='DRAFT'),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('requested_by_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['requested_by_id'], ['users.id'],
            name='job_positions_requested_by_id_fkey',
            ondelete='SET NULL', onupdate='CASCADE'
        ),
    )
    op.create_index(op.f('ix_job_positions_id'), 'job_positions', ['id'], unique=False)
    op.create_index(op.f('ix_job_positions_name'), 'job_positions', ['name'], unique=True)
    op.create_index(op.f('ix_job_positions_status'), 'job_positions', ['status'], unique=False)
    op.create_index(op.f('ix_job_positions_is_archived'), 'job_positions', ['is_archived'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_job_positions_is_archived'), table_name='job_positions')
    op.drop_index(op.f('ix_job_positions_status'), table_name='job_positions')
    op.drop_index(op.f('ix_job_positions_name'), table_name='job_positions')
    op.drop_index(op.f('ix_job_positions_id'), table_name='job_positions')
    op.drop_table('job_positions')

    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
