"""create ledger tables

Revision ID: b7c1d2e3f4a5
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b7c1d2e3f4a5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, server_default=''),
        sa.Column('current_month', sa.String(7), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'monthly_income',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('month', sa.String(7), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('locked_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.UniqueConstraint('user_id', 'month', name='uq_monthly_income_user_month'),
    )
    op.create_index('ix_monthly_income_user_id', 'monthly_income', ['user_id'])

    op.create_table(
        'mandatory_rules',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_mandatory_rules_user_id', 'mandatory_rules', ['user_id'])

    op.create_table(
        'categories',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('month', sa.String(7), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('budgeted', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('spent', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_categories_user_month', 'categories', ['user_id', 'month'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('month', sa.String(7), nullable=False),
        sa.Column('category_id', sa.String(64), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('note', sa.Text(), nullable=False, server_default=''),
        sa.Column('date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_expenses_user_month', 'expenses', ['user_id', 'month'])
    op.create_index('ix_expenses_category_id', 'expenses', ['category_id'])

    op.create_table(
        'savings',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('month', sa.String(7), nullable=False),
        sa.Column('amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('source', sa.String(16), nullable=False),
        sa.Column('idempotency_key', sa.String(255), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_savings_user_month', 'savings', ['user_id', 'month'])
    op.create_index('ix_savings_idempotency_key', 'savings', ['idempotency_key'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_savings_idempotency_key', table_name='savings')
    op.drop_index('ix_savings_user_month', table_name='savings')
    op.drop_table('savings')
    op.drop_index('ix_expenses_category_id', table_name='expenses')
    op.drop_index('ix_expenses_user_month', table_name='expenses')
    op.drop_table('expenses')
    op.drop_index('ix_categories_user_month', table_name='categories')
    op.drop_table('categories')
    op.drop_index('ix_mandatory_rules_user_id', table_name='mandatory_rules')
    op.drop_table('mandatory_rules')
    op.drop_index('ix_monthly_income_user_id', table_name='monthly_income')
    op.drop_table('monthly_income')
    op.drop_table('users')
