"""
Wallet model - the unit of financial truth
"""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Enum, ForeignKey, Numeric, String, Uuid

from paywallet.core.clock import utcnow
from paywallet.db.base import Base
from paywallet.models.enums import CurrencyType, KycLevel, WalletStatus


class Wallet(Base):
    """Wallet model - balance, tier-derived limits and usage counters"""
    __tablename__ = "wallets"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    owner_name = Column(String(128), nullable=False)
    phone_number = Column(String(20), nullable=False)
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    currency = Column(Enum(CurrencyType, name="currency_type"), nullable=False, default=CurrencyType.MAD)
    status = Column(Enum(WalletStatus, name="wallet_status"), nullable=False, default=WalletStatus.ACTIVE)
    kyc_level = Column(Enum(KycLevel, name="kyc_level"), nullable=False, default=KycLevel.NONE)

    daily_limit = Column(Numeric(18, 2), nullable=False)
    monthly_limit = Column(Numeric(18, 2), nullable=False)
    current_daily_usage = Column(Numeric(18, 2), nullable=False, default=0)
    current_monthly_usage = Column(Numeric(18, 2), nullable=False, default=0)

    offer_id = Column(Uuid(as_uuid=True), ForeignKey("offers.id"), nullable=True, index=True)

    cin_number = Column(String(16), nullable=True)
    is_identity_verified = Column(Boolean, nullable=False, default=False)
    verification_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)

    # Constraints
    __table_args__ = (
        CheckConstraint('balance >= 0', name='chk_wallet_balance_nonneg'),
        CheckConstraint('current_daily_usage >= 0', name='chk_wallet_daily_usage_nonneg'),
        CheckConstraint('current_monthly_usage >= 0', name='chk_wallet_monthly_usage_nonneg'),
    )

    def __repr__(self):
        return f"<Wallet(id={self.id}, owner_id={self.owner_id}, balance={self.balance}, kyc={self.kyc_level})>"
