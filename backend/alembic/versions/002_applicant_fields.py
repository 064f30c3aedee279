"""Applicant fields

Revision ID: 002
Revises: 001
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'applicant_fields',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('field_name', sa.String(length=100), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('field_type', sa.String(length=20), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False, server_default='personal'),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('validation_rules', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('options', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('default_value', sa.String(length=255), nullable=True),
        sa.Column('placeholder', sa.String(length=255), nullable=True),
        sa.Column('help_text', sa.Text(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('scoring_weight', sa.Numeric(precision=4, scale=2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
    )
    op.create_index('ix_applicant_fields_field_name', 'applicant_fields', ['field_name'], unique=True)
    op.create_index('ix_applicant_fields_category', 'applicant_fields', ['category'])
    op.create_index('ix_applicant_fields_is_active', 'applicant_fields', ['is_active'])


def downgrade() -> None:
    op.drop_index('ix_applicant_fields_is_active', table_name='applicant_fields')
    op.drop_index('ix_applicant_fields_category', table_name='applicant_fields')
    op.drop_index('ix_applicant_fields_field_name', table_name='applicant_fields')
    op.drop_table('applicant_fields')
