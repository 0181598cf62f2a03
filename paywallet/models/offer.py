"""
Offer model - promotional policy a wallet can borrow
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, Enum, Numeric, String, Text, Uuid

from paywallet.core.clock import as_naive_utc, utcnow
from paywallet.db.base import Base
from paywallet.models.enums import OfferType


class Offer(Base):
    """Offer model - cashback, reduced fees or recharge bonus"""
    __tablename__ = "offers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(128), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(Enum(OfferType, name="offer_type"), nullable=False)
    spending_limit = Column(Numeric(18, 2), nullable=False)
    valid_from = Column(DateTime, nullable=False)
    valid_to = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    cashback_percentage = Column(Numeric(5, 2), nullable=True)
    fees_discount = Column(Numeric(5, 2), nullable=True)
    recharge_bonus = Column(Numeric(5, 2), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True)

    def is_in_effect(self, now: Optional[datetime] = None) -> bool:
        """Active flag set and not yet expired"""
        now = as_naive_utc(now) if now else utcnow()
        return bool(self.is_active) and self.valid_to >= now

    def __repr__(self):
        return f"<Offer(id={self.id}, name={self.name}, type={self.type}, active={self.is_active})>"
