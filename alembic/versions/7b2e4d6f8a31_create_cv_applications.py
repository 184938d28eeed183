"""Create cv_applications table

Revision ID: 7b2e4d6f8a31
Revises: 3f1a9c2b7d10
Create Date: 2026-05-12 12:14:12.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '7b2e4d6f8a31'
down_revision = '3f1a9c2b7d10'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'cv_applications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('qualification', sa.String(length=255), nullable=True),
        sa.Column('agree_terms', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('cv_file_name', sa.String(length=255), nullable=False),
        sa.Column('cv_file_object_key', sa.String(length=512), nullable=False),
        sa.Column('status', sa.String(length=40), nullable=False, server_default='SUBMITTED'),

        # Analysis output
        sa.Column('score', sa.Float(), nullable=True),
        sa.Column('justification', sa.Text(), nullable=True),
        sa.Column('similarity_score', sa.Float(), nullable=True),
        sa.Column('passed_hard_gate', sa.Boolean(), nullable=True),
        sa.Column('qualitative_assessment', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('cv_data', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('requirement_data', postgresql.JSONB(astext_type=sa.Text()), nullable=True),

        sa.Column('interview_notes', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('applied_position_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['applied_position_id'], ['job_positions.id'],
            name='cv_applications_applied_position_id_fkey',
            ondelete='SET NULL', onupdate='CASCADE'
        ),
    )
    op.create_index(op.f('ix_cv_applications_id'), 'cv_applications', ['id'], unique=False)
    op.create_index(op.f('ix_cv_applications_email'), 'cv_applications', ['email'], unique=False)
    op.create_index(op.f('ix_cv_applications_status'), 'cv_applications', ['status'], unique=False)
    op.create_index(op.f('ix_cv_applications_similarity_score'), 'cv_applications', ['similarity_score'], unique=False)
    op.create_index(op.f('ix_cv_applications_is_archived'), 'cv_applications', ['is_archived'], unique=False)
    op.create_index(op.f('ix_cv_applications_applied_position_id'), 'cv_applications', ['applied_position_id'], unique=False)
    op.create_index(op.f('ix_cv_applications_created_at'), 'cv_applications', ['created_at'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_cv_applications_created_at'), table_name='cv_applications')
    op.drop_index(op.f('ix_cv_applications_applied_position_id'), table_name='cv_applications')
    op.drop_index(op.f('ix_cv_applications_is_archived'), table_name='cv_applications')
    op.drop_index(op.f('ix_cv_applications_similarity_score'), table_name='cv_applications')
    op.drop_index(op.f('ix_cv_applications_status'), table_name='cv_applications')
    op.drop_index(op.f('ix_cv_applications_email'), table_name='cv_applications')
    op.drop_index(op.f('ix_cv_applications_id'), table_name='cv_applications')
    op.drop_table('cv_applications')
