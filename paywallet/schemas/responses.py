"""
Response records returned by the services to the API layer
"""

import math
from datetime import datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from paywallet.models.enums import (
    CurrencyType,
    KycLevel,
    OfferType,
    PaymentMethod,
    TransactionType,
    WalletStatus,
)

T = TypeVar("T")


class OfferResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    type: OfferType
    spending_limit: Decimal
    valid_from: datetime
    valid_to: datetime
    is_active: bool
    cashback_percentage: Optional[Decimal] = None
    fees_discount: Optional[Decimal] = None
    recharge_bonus: Optional[Decimal] = None


class WalletResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    owner_name: str
    phone_number: str
    balance: Decimal
    currency: CurrencyType
    status: WalletStatus
    kyc_level: KycLevel
    daily_limit: Decimal
    monthly_limit: Decimal
    current_daily_usage: Decimal
    current_monthly_usage: Decimal
    created_at: datetime
    updated_at: Optional[datetime] = None
    offer: Optional[OfferResponse] = None


class BillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    biller_name: str
    biller_reference: str
    customer_reference: str
    amount: Decimal
    due_date: Optional[datetime] = None
    is_paid: bool
    payment_date: Optional[datetime] = None
    bill_type: str


class TransactionResponse(BaseModel):
    """Outcome of an engine operation; is_successful=False means settlement failed"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    wallet_id: UUID
    destination_wallet_id: Optional[UUID] = None
    type: TransactionType
    amount: Decimal
    fee: Decimal
    cashback: Optional[Decimal] = None
    description: Optional[str] = None
    reference_number: Optional[str] = None
    is_successful: bool
    failure_reason: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    created_at: datetime
    bill: Optional[BillResponse] = None


class PagedResponse(BaseModel, Generic[T]):
    items: List[T]
    page_number: int
    page_size: int
    total_count: int
    total_pages: int

    @classmethod
    def build(cls, items: List[T], page_number: int, page_size: int, total_count: int) -> "PagedResponse[T]":
        total_pages = math.ceil(total_count / page_size) if page_size else 0
        return cls(
            items=items,
            page_number=page_number,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages
        )


class KycVerificationStatus(BaseModel):
    is_verified: bool
    current_level: KycLevel
    message: str
    verification_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None


class BillVerificationResult(BaseModel):
    """Answer from the biller when checking a bill before payment"""
    is_valid: bool
    message: str
    due_date: Optional[datetime] = None
