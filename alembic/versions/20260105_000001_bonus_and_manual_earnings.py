"""Bonus transactions and manual earnings

Revision ID: 20260105_000001
Revises: 20260101_000001
Create Date: 2026-01-05

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260105_000001'
down_revision: Union[str, None] = '20260101_000001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.DECIMAL(18, 8)


def upgrade() -> None:
    # bonus_transactions
    op.create_table(
        'bonus_transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('admin_id', sa.Integer(), nullable=True),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column(
            'status', sa.String(length=20), nullable=False,
            server_default='completed'
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            'amount > 0', name='check_bonus_transaction_amount_positive'
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_bonus_transactions_user_id_users', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['admin_id'], ['users.id'],
            name='fk_bonus_transactions_admin_id_users', ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_bonus_transactions'),
    )
    op.create_index(
        'ix_bonus_transactions_user_id', 'bonus_transactions',
        ['user_id'], unique=False
    )
    op.create_index(
        'ix_bonus_transactions_admin_id', 'bonus_transactions',
        ['admin_id'], unique=False
    )

    # income_collections: admin manual earnings
    op.add_column(
        'income_collections',
        sa.Column(
            'is_manual', sa.Boolean(), nullable=False,
            server_default=sa.text('false')
        ),
    )
    op.add_column(
        'income_collections', sa.Column('reason', sa.Text(), nullable=True)
    )
    op.add_column(
        'income_collections',
        sa.Column('credited_by_id', sa.Integer(), nullable=True),
    )
    op.create_foreign_key(
        'fk_income_collections_credited_by_id_users',
        'income_collections', 'users',
        ['credited_by_id'], ['id'], ondelete='SET NULL'
    )
    op.drop_constraint(
        'check_income_collection_days_positive', 'income_collections',
        type_='check'
    )
    op.create_check_constraint(
        'check_income_collection_days', 'income_collections',
        'days_collected > 0 OR (is_manual AND days_collected = 0)'
    )


def downgrade() -> None:
    op.execute('DELETE FROM income_collections WHERE is_manual')
    op.drop_constraint(
        'check_income_collection_days', 'income_collections', type_='check'
    )
    op.create_check_constraint(
        'check_income_collection_days_positive', 'income_collections',
        'days_collected > 0'
    )
    op.drop_constraint(
        'fk_income_collections_credited_by_id_users', 'income_collections',
        type_='foreignkey'
    )
    op.drop_column('income_collections', 'credited_by_id')
    op.drop_column('income_collections', 'reason')
    op.drop_column('income_collections', 'is_manual')

    op.drop_index(
        'ix_bonus_transactions_admin_id', table_name='bonus_transactions'
    )
    op.drop_index(
        'ix_bonus_transactions_user_id', table_name='bonus_transactions'
    )
    op.drop_table('bonus_transactions')
