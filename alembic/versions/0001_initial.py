"""Initial wallet schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

kyc_level = sa.Enum('NONE', 'BASIC', 'STANDARD', 'ADVANCED', name='kyc_level')
user_role = sa.Enum('USER', 'ADMIN', name='user_role')
offer_type = sa.Enum('CASHBACK', 'REDUCED_FEES', 'RECHARGE_BONUS', name='offer_type')
currency_type = sa.Enum('MAD', 'EUR', 'USD', name='currency_type')
wallet_status = sa.Enum('ACTIVE', 'INACTIVE', 'BLOCKED', name='wallet_status')
transaction_type = sa.Enum('DEPOSIT', 'WITHDRAWAL', 'TRANSFER', 'BILL_PAYMENT', 'FEE', 'BONUS', name='transaction_type')
payment_method = sa.Enum('CREDIT_CARD', 'BANK_TRANSFER', 'ORANGE_MONEY', 'INWI_MONEY', 'CASH', name='payment_method')

# wallets reuse the type created with the users table
wallet_kyc_level = postgresql.ENUM('NONE', 'BASIC', 'STANDARD', 'ADVANCED', name='kyc_level', create_type=False)


def upgrade() -> None:
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('username', sa.String(length=48), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('full_name', sa.String(length=128), nullable=True),
        sa.Column('phone_number', sa.String(length=20), nullable=True),
        sa.Column('cin_number', sa.String(length=16), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('kyc_level', kyc_level, nullable=False, server_default='NONE'),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_phone_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_two_factor_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('role', user_role, nullable=False, server_default='USER'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email')
    )

    # Create offers table
    op.create_table('offers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', offer_type, nullable=False),
        sa.Column('spending_limit', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('valid_from', sa.DateTime(), nullable=False),
        sa.Column('valid_to', sa.DateTime(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('cashback_percentage', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('fees_discount', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('recharge_bonus', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Create wallets table
    op.create_table('wallets',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('owner_name', sa.String(length=128), nullable=False),
        sa.Column('phone_number', sa.String(length=20), nullable=False),
        sa.Column('balance', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('currency', currency_type, nullable=False, server_default='MAD'),
        sa.Column('status', wallet_status, nullable=False, server_default='ACTIVE'),
        sa.Column('kyc_level', wallet_kyc_level, nullable=False, server_default='NONE'),
        sa.Column('daily_limit', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('monthly_limit', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('current_daily_usage', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('current_monthly_usage', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('offer_id', sa.Uuid(), nullable=True),
        sa.Column('cin_number', sa.String(length=16), nullable=True),
        sa.Column('is_identity_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('verification_date', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['offer_id'], ['offers.id']),
        sa.CheckConstraint('balance >= 0', name='chk_wallet_balance_nonneg'),
        sa.CheckConstraint('current_daily_usage >= 0', name='chk_wallet_daily_usage_nonneg'),
        sa.CheckConstraint('current_monthly_usage >= 0', name='chk_wallet_monthly_usage_nonneg')
    )
    op.create_index('ix_wallets_owner_id', 'wallets', ['owner_id'])
    op.create_index('ix_wallets_offer_id', 'wallets', ['offer_id'])

    # Create bills table
    op.create_table('bills',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('biller_name', sa.String(length=128), nullable=False),
        sa.Column('biller_reference', sa.String(length=64), nullable=False),
        sa.Column('customer_reference', sa.String(length=64), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('payment_date', sa.DateTime(), nullable=True),
        sa.Column('bill_type', sa.String(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Create transactions table
    op.create_table('transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('wallet_id', sa.Uuid(), nullable=False),
        sa.Column('destination_wallet_id', sa.Uuid(), nullable=True),
        sa.Column('type', transaction_type, nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('fee', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('cashback', sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column('description', sa.String(length=256), nullable=True),
        sa.Column('reference_number', sa.String(length=64), nullable=True),
        sa.Column('is_successful', sa.Boolean(), nullable=False),
        sa.Column('failure_reason', sa.String(length=256), nullable=True),
        sa.Column('payment_method', payment_method, nullable=True),
        sa.Column('bill_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['bill_id'], ['bills.id'])
    )
    op.create_index('ix_transactions_wallet_id', 'transactions', ['wallet_id'])
    op.create_index('ix_transactions_destination_wallet_id', 'transactions', ['destination_wallet_id'])
    op.create_index('ix_transactions_created_at', 'transactions', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_transactions_created_at', table_name='transactions')
    op.drop_index('ix_transactions_destination_wallet_id', table_name='transactions')
    op.drop_index('ix_transactions_wallet_id', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('bills')
    op.drop_index('ix_wallets_offer_id', table_name='wallets')
    op.drop_index('ix_wallets_owner_id', table_name='wallets')
    op.drop_table('wallets')
    op.drop_table('offers')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (payment_method, transaction_type, wallet_status, currency_type, offer_type, user_role, kyc_level):
        enum_type.drop(bind, checkfirst=True)
