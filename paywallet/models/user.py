"""
User model - identity record owning wallets by id
"""

import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, Enum, String, Text, Uuid

from paywallet.core.clock import utcnow
from paywallet.db.base import Base
from paywallet.models.enums import KycLevel, UserRole


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(48), nullable=False, unique=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    full_name = Column(String(128), nullable=True)
    phone_number = Column(String(20), nullable=True)
    cin_number = Column(String(16), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    kyc_level = Column(Enum(KycLevel, name="kyc_level"), nullable=False, default=KycLevel.NONE)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    is_phone_verified = Column(Boolean, nullable=False, default=False)
    is_two_factor_enabled = Column(Boolean, nullable=False, default=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
