"""
Bill model - created when a bill payment is attempted
"""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Numeric, String, Uuid

from paywallet.core.clock import utcnow
from paywallet.db.base import Base


class Bill(Base):
    """Bill model - marked paid only when the biller confirms payment"""
    __tablename__ = "bills"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    biller_name = Column(String(128), nullable=False)
    biller_reference = Column(String(64), nullable=False)
    customer_reference = Column(String(64), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    due_date = Column(DateTime, nullable=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    payment_date = Column(DateTime, nullable=True)
    bill_type = Column(String(32), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Bill(id={self.id}, biller={self.biller_name}, amount={self.amount}, paid={self.is_paid})>"
