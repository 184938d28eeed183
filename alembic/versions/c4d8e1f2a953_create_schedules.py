"""Create schedules table

Revision ID: c4d8e1f2a953
Revises: 7b2e4d6f8a31
Create Date: 2026-11-14 07:47:40.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'c4d8e1f2a953'
down_revision = '7b2e4d6f8a31'
branch_labels = None
depends_on = None


def upgrade():
    # application_id set: interview/onboarding slot; NULL: manual HR calendar entry
    op.create_table(
        'schedules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('application_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['application_id'], ['cv_applications.id'],
            name='schedules_application_id_fkey',
            ondelete='SET NULL', onupdate='CASCADE'
        ),
    )
    op.create_index(op.f('ix_schedules_id'), 'schedules', ['id'], unique=False)
    op.create_index(op.f('ix_schedules_start_date'), 'schedules', ['start_date'], unique=False)
    op.create_index(op.f('ix_schedules_end_date'), 'schedules', ['end_date'], unique=False)
    op.create_index(op.f('ix_schedules_application_id'), 'schedules', ['application_id'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_schedules_application_id'), table_name='schedules')
    op.drop_index(op.f('ix_schedules_end_date'), table_name='schedules')
    op.drop_index(op.f('ix_schedules_start_date'), table_name='schedules')
    op.drop_index(op.f('ix_schedules_id'), table_name='schedules')
    op.drop_table('schedules')
