"""Initial schema

Revision ID: 20260101_000001
Revises:
Create Date: 2026-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260101_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.DECIMAL(18, 8)
PERCENT = sa.DECIMAL(10, 4)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    # users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('referral_code', sa.String(length=20), nullable=False),
        sa.Column('balance', MONEY, nullable=False, server_default='0'),
        sa.Column(
            'earned_balance', MONEY, nullable=False, server_default='0',
            comment='Investment earnings locked until the investment completes'
        ),
        sa.Column('referred_by_id', sa.Integer(), nullable=True),
        sa.Column(
            'is_admin', sa.Boolean(), nullable=False,
            server_default=sa.text('false')
        ),
        *_timestamps(),
        sa.CheckConstraint(
            'balance >= 0', name='check_user_balance_non_negative'
        ),
        sa.CheckConstraint(
            'earned_balance >= 0',
            name='check_user_earned_balance_non_negative'
        ),
        sa.CheckConstraint(
            'referred_by_id IS NULL OR referred_by_id <> id',
            name='check_user_not_self_referred'
        ),
        sa.ForeignKeyConstraint(
            ['referred_by_id'], ['users.id'],
            name='fk_users_referred_by_id_users', ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index(
        'ix_users_referral_code', 'users', ['referral_code'], unique=True
    )
    op.create_index(
        'ix_users_referred_by_id', 'users', ['referred_by_id'], unique=False
    )

    # admin_settings (single row)
    op.create_table(
        'admin_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('referral_l1_percent', PERCENT, nullable=False),
        sa.Column('referral_l2_percent', PERCENT, nullable=False),
        sa.Column('referral_l3_percent', PERCENT, nullable=False),
        sa.Column('min_deposit_amount', MONEY, nullable=False),
        sa.Column('min_withdrawal_amount', MONEY, nullable=False),
        sa.Column('withdrawal_fee_percent', PERCENT, nullable=False),
        sa.Column('max_investment_amount', MONEY, nullable=False),
        sa.Column('withdrawal_enabled', sa.Boolean(), nullable=False),
        sa.Column(
            'withdrawal_auto_schedule', sa.Boolean(), nullable=False,
            comment='When false, withdrawals are accepted at any time'
        ),
        sa.Column('withdrawal_start_time', sa.String(length=5), nullable=False),
        sa.Column('withdrawal_end_time', sa.String(length=5), nullable=False),
        sa.Column(
            'withdrawal_days_enabled', sa.String(length=100), nullable=False,
            comment='Comma-separated lowercase weekday names'
        ),
        sa.Column('withdrawal_timezone', sa.String(length=64), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('id = 1', name='check_admin_settings_single_row'),
        sa.CheckConstraint(
            'referral_l1_percent >= 0 AND referral_l1_percent <= 100',
            name='check_referral_l1_percent_range'
        ),
        sa.CheckConstraint(
            'referral_l2_percent >= 0 AND referral_l2_percent <= 100',
            name='check_referral_l2_percent_range'
        ),
        sa.CheckConstraint(
            'referral_l3_percent >= 0 AND referral_l3_percent <= 100',
            name='check_referral_l3_percent_range'
        ),
        sa.CheckConstraint(
            'withdrawal_fee_percent >= 0 AND withdrawal_fee_percent < 100',
            name='check_withdrawal_fee_percent_range'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_admin_settings'),
    )

    # plans
    op.create_table(
        'plans',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('profit_percent', PERCENT, nullable=False),
        sa.Column('min_investment', MONEY, nullable=False),
        sa.Column('max_investment', MONEY, nullable=True),
        sa.Column('capital_return', sa.Boolean(), nullable=False),
        sa.Column(
            'status', sa.String(length=20), nullable=False,
            server_default='active'
        ),
        *_timestamps(),
        sa.CheckConstraint(
            'duration_days > 0', name='check_plan_duration_positive'
        ),
        sa.CheckConstraint(
            'profit_percent > 0', name='check_plan_profit_positive'
        ),
        sa.CheckConstraint(
            'min_investment > 0', name='check_plan_min_investment_positive'
        ),
        sa.CheckConstraint(
            'max_investment IS NULL OR max_investment >= min_investment',
            name='check_plan_max_not_below_min'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_plans'),
    )
    op.create_index('ix_plans_status', 'plans', ['status'], unique=False)

    # deposits
    op.create_table(
        'deposits',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('sender_name', sa.String(length=255), nullable=True),
        sa.Column('sender_account_last4', sa.String(length=4), nullable=True),
        sa.Column('proof_url', sa.Text(), nullable=True),
        sa.Column(
            'status', sa.String(length=20), nullable=False,
            server_default='pending'
        ),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('processed_by_id', sa.Integer(), nullable=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount > 0', name='check_deposit_amount_positive'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_deposits_user_id_users', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['processed_by_id'], ['users.id'],
            name='fk_deposits_processed_by_id_users', ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_deposits'),
    )
    op.create_index('ix_deposits_user_id', 'deposits', ['user_id'], unique=False)
    op.create_index('ix_deposits_status', 'deposits', ['status'], unique=False)

    # investments
    op.create_table(
        'investments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=False),
        sa.Column('amount_invested', MONEY, nullable=False),
        sa.Column('daily_profit_amount', MONEY, nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('capital_return', sa.Boolean(), nullable=False),
        sa.Column(
            'status', sa.String(length=20), nullable=False,
            server_default='active'
        ),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            'last_income_collection_date', sa.DateTime(timezone=True),
            nullable=True
        ),
        sa.Column(
            'total_days_collected', sa.Integer(), nullable=False,
            server_default='0'
        ),
        sa.Column('total_earned', MONEY, nullable=False, server_default='0'),
        *_timestamps(),
        sa.CheckConstraint(
            'amount_invested > 0', name='check_investment_amount_positive'
        ),
        sa.CheckConstraint(
            'total_days_collected >= 0',
            name='check_investment_days_collected_non_negative'
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_investments_user_id_users', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['plan_id'], ['plans.id'],
            name='fk_investments_plan_id_plans', ondelete='RESTRICT'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_investments'),
    )
    op.create_index(
        'ix_investments_user_id', 'investments', ['user_id'], unique=False
    )
    op.create_index(
        'ix_investments_plan_id', 'investments', ['plan_id'], unique=False
    )
    op.create_index(
        'ix_investments_status', 'investments', ['status'], unique=False
    )
    op.create_index(
        'ix_investments_end_date', 'investments', ['end_date'], unique=False
    )

    # income_collections
    op.create_table(
        'income_collections',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('investment_id', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('days_collected', sa.Integer(), nullable=False),
        sa.Column(
            'is_final_collection', sa.Boolean(), nullable=False,
            server_default=sa.text('false')
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            'amount > 0', name='check_income_collection_amount_positive'
        ),
        sa.CheckConstraint(
            'days_collected > 0', name='check_income_collection_days_positive'
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_income_collections_user_id_users', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['investment_id'], ['investments.id'],
            name='fk_income_collections_investment_id_investments',
            ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_income_collections'),
    )
    op.create_index(
        'ix_income_collections_user_id', 'income_collections',
        ['user_id'], unique=False
    )
    op.create_index(
        'ix_income_collections_investment_id', 'income_collections',
        ['investment_id'], unique=False
    )

    # referral_commissions
    op.create_table(
        'referral_commissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referred_user_id', sa.Integer(), nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('commission_type', sa.String(length=20), nullable=False),
        sa.Column('source_id', sa.Integer(), nullable=False),
        sa.Column('base_amount', MONEY, nullable=False),
        sa.Column('commission_percent', PERCENT, nullable=False),
        sa.Column('commission_amount', MONEY, nullable=False),
        sa.Column(
            'status', sa.String(length=20), nullable=False,
            server_default='completed'
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            'commission_type', 'source_id', 'level',
            name='uq_referral_commission_event_level'
        ),
        sa.CheckConstraint(
            'level >= 1 AND level <= 3',
            name='check_referral_commission_level_range'
        ),
        sa.CheckConstraint(
            'commission_amount > 0',
            name='check_referral_commission_amount_positive'
        ),
        sa.CheckConstraint(
            "commission_type IN ('deposit', 'earning')",
            name='check_referral_commission_type'
        ),
        sa.ForeignKeyConstraint(
            ['referred_user_id'], ['users.id'],
            name='fk_referral_commissions_referred_user_id_users',
            ondelete='RESTRICT'
        ),
        sa.ForeignKeyConstraint(
            ['referrer_id'], ['users.id'],
            name='fk_referral_commissions_referrer_id_users',
            ondelete='RESTRICT'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_referral_commissions'),
    )
    op.create_index(
        'ix_referral_commissions_referred_user_id', 'referral_commissions',
        ['referred_user_id'], unique=False
    )
    op.create_index(
        'ix_referral_commissions_referrer_id', 'referral_commissions',
        ['referrer_id'], unique=False
    )
    op.create_index(
        'idx_referral_commission_referrer_created', 'referral_commissions',
        ['referrer_id', 'created_at'], unique=False
    )

    # withdrawals
    op.create_table(
        'withdrawals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('fee_percent', PERCENT, nullable=False),
        sa.Column('fee_amount', MONEY, nullable=False),
        sa.Column('net_amount', MONEY, nullable=False),
        sa.Column(
            'status', sa.String(length=20), nullable=False,
            server_default='pending'
        ),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            'amount > 0', name='check_withdrawal_amount_positive'
        ),
        sa.CheckConstraint(
            'fee_amount >= 0', name='check_withdrawal_fee_non_negative'
        ),
        sa.CheckConstraint(
            'net_amount = amount - fee_amount',
            name='check_withdrawal_net_amount'
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_withdrawals_user_id_users', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_withdrawals'),
    )
    op.create_index(
        'ix_withdrawals_user_id', 'withdrawals', ['user_id'], unique=False
    )
    op.create_index(
        'ix_withdrawals_status', 'withdrawals', ['status'], unique=False
    )


def downgrade() -> None:
    op.drop_index('ix_withdrawals_status', table_name='withdrawals')
    op.drop_index('ix_withdrawals_user_id', table_name='withdrawals')
    op.drop_table('withdrawals')

    op.drop_index(
        'idx_referral_commission_referrer_created',
        table_name='referral_commissions'
    )
    op.drop_index(
        'ix_referral_commissions_referrer_id',
        table_name='referral_commissions'
    )
    op.drop_index(
        'ix_referral_commissions_referred_user_id',
        table_name='referral_commissions'
    )
    op.drop_table('referral_commissions')

    op.drop_index(
        'ix_income_collections_investment_id', table_name='income_collections'
    )
    op.drop_index(
        'ix_income_collections_user_id', table_name='income_collections'
    )
    op.drop_table('income_collections')

    op.drop_index('ix_investments_end_date', table_name='investments')
    op.drop_index('ix_investments_status', table_name='investments')
    op.drop_index('ix_investments_plan_id', table_name='investments')
    op.drop_index('ix_investments_user_id', table_name='investments')
    op.drop_table('investments')

    op.drop_index('ix_deposits_status', table_name='deposits')
    op.drop_index('ix_deposits_user_id', table_name='deposits')
    op.drop_table('deposits')

    op.drop_index('ix_plans_status', table_name='plans')
    op.drop_table('plans')

    op.drop_table('admin_settings')

    op.drop_index('ix_users_referred_by_id', table_name='users')
    op.drop_index('ix_users_referral_code', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
