"""
Transaction model - append-only ledger row, one per monetary movement
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Numeric, String, Uuid

from paywallet.core.clock import utcnow
from paywallet.db.base import Base
from paywallet.models.enums import PaymentMethod, TransactionType


class Transaction(Base):
    """Transaction model - never updated once written"""
    __tablename__ = "transactions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    wallet_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    destination_wallet_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    fee = Column(Numeric(18, 2), nullable=False, default=0)
    cashback = Column(Numeric(18, 2), nullable=True)
    description = Column(String(256), nullable=True)
    reference_number = Column(String(64), nullable=True)
    is_successful = Column(Boolean, nullable=False)
    failure_reason = Column(String(256), nullable=True)
    payment_method = Column(Enum(PaymentMethod, name="payment_method"), nullable=True)
    bill_id = Column(Uuid(as_uuid=True), ForeignKey("bills.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return (
            f"<Transaction(id={self.id}, wallet_id={self.wallet_id}, type={self.type}, "
            f"amount={self.amount}, ok={self.is_successful})>"
        )
