"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create scoring_configs table
    op.create_table(
        'scoring_configs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('factor', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=False, server_default='general'),
        sa.Column('max_points', sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column('weight', sa.Numeric(precision=4, scale=2), nullable=False, server_default='1.00'),
        sa.Column('calculation_type', sa.String(length=20), nullable=False, server_default='linear'),
        sa.Column('config_type', sa.String(length=20), nullable=False, server_default='static'),
        sa.Column('thresholds', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('min_value', sa.Numeric(precision=15, scale=4), nullable=True),
        sa.Column('max_value', sa.Numeric(precision=15, scale=4), nullable=True),
        sa.Column('optimal_value', sa.Numeric(precision=15, scale=4), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.CheckConstraint('weight >= 0.1 AND weight <= 3.0', name='ck_scoring_configs_weight'),
    )
    op.create_index('ix_scoring_configs_factor', 'scoring_configs', ['factor'], unique=True)
    op.create_index('ix_scoring_configs_category', 'scoring_configs', ['category'])
    op.create_index('ix_scoring_configs_is_active', 'scoring_configs', ['is_active'])

    # Create score_ranges table
    op.create_table(
        'score_ranges',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('min_score', sa.Integer(), nullable=False),
        sa.Column('max_score', sa.Integer(), nullable=True),
        sa.Column('color', sa.String(length=20), nullable=True),
        sa.Column('approval_status', sa.String(length=50), nullable=True),
        sa.Column('risk_level', sa.String(length=50), nullable=True),
        sa.Column('interest_rate_adjustment', sa.Numeric(precision=5, scale=2), nullable=False, server_default='0.00'),
        sa.Column('loan_limit_adjustment', sa.Numeric(precision=5, scale=2), nullable=False, server_default='1.00'),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.CheckConstraint('min_score >= 300 AND min_score <= 850', name='ck_score_ranges_min_score'),
        sa.CheckConstraint('max_score IS NULL OR max_score >= min_score', name='ck_score_ranges_bounds'),
        sa.CheckConstraint('priority >= 1 AND priority <= 10', name='ck_score_ranges_priority'),
    )
    op.create_index('ix_score_ranges_min_score', 'score_ranges', ['min_score'])
    op.create_index('ix_score_ranges_is_active', 'score_ranges', ['is_active'])

    # Create rules table
    op.create_table(
        'rules',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('condition', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('action_value', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('weight', sa.Numeric(precision=4, scale=2), nullable=False, server_default='1.00'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.CheckConstraint('priority >= 1 AND priority <= 10', name='ck_rules_priority'),
    )
    op.create_index('ix_rules_type', 'rules', ['type'])
    op.create_index('ix_rules_priority', 'rules', ['priority'])
    op.create_index('ix_rules_is_active', 'rules', ['is_active'])

    # Create predictions table
    op.create_table(
        'predictions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('applicant_hash', sa.String(length=16), nullable=False),
        sa.Column('credit_score', sa.Integer(), nullable=False),
        sa.Column('approval_status', sa.String(length=50), nullable=False),
        sa.Column('risk_level', sa.String(length=50), nullable=False),
        sa.Column('model_version', sa.String(length=20), nullable=False),
        sa.Column('processing_time_ms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('applicant_data', postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('user_session', sa.String(length=100), nullable=True),
    )
    op.create_index('ix_predictions_applicant_hash', 'predictions', ['applicant_hash'])
    op.create_index('ix_predictions_approval_status', 'predictions', ['approval_status'])
    op.create_index('ix_predictions_created_at', 'predictions', ['created_at'])

    # Create rule_executions table
    op.create_table(
        'rule_executions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('prediction_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rule_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('triggered', sa.Boolean(), nullable=False),
        sa.Column('result', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('score_adjustment', sa.Numeric(precision=8, scale=2), nullable=True),
        sa.Column('status_override', sa.String(length=50), nullable=True),
        sa.Column('limit_adjustment', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['prediction_id'], ['predictions.id'], ondelete='CASCADE'),
        # No cascade: deleting a rule with history must be explicit
        sa.ForeignKeyConstraint(['rule_id'], ['rules.id']),
    )
    op.create_index('ix_rule_executions_prediction_id', 'rule_executions', ['prediction_id'])
    op.create_index('ix_rule_executions_rule_id', 'rule_executions', ['rule_id'])
    op.create_index('ix_rule_executions_timestamp', 'rule_executions', ['timestamp'])


def downgrade() -> None:
    # Drop tables in reverse order (respecting foreign key constraints)
    op.drop_index('ix_rule_executions_timestamp', table_name='rule_executions')
    op.drop_index('ix_rule_executions_rule_id', table_name='rule_executions')
    op.drop_index('ix_rule_executions_prediction_id', table_name='rule_executions')
    op.drop_table('rule_executions')

    op.drop_index('ix_predictions_created_at', table_name='predictions')
    op.drop_index('ix_predictions_approval_status', table_name='predictions')
    op.drop_index('ix_predictions_applicant_hash', table_name='predictions')
    op.drop_table('predictions')

    op.drop_index('ix_rules_is_active', table_name='rules')
    op.drop_index('ix_rules_priority', table_name='rules')
    op.drop_index('ix_rules_type', table_name='rules')
    op.drop_table('rules')

    op.drop_index('ix_score_ranges_is_active', table_name='score_ranges')
    op.drop_index('ix_score_ranges_min_score', table_name='score_ranges')
    op.drop_table('score_ranges')

    op.drop_index('ix_scoring_configs_is_active', table_name='scoring_configs')
    op.drop_index('ix_scoring_configs_category', table_name='scoring_configs')
    op.drop_index('ix_scoring_configs_factor', table_name='scoring_configs')
    op.drop_table('scoring_configs')
