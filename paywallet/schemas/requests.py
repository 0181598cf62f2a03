"""
Request models consumed by the services
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from paywallet.models.enums import CurrencyType, KycLevel, OfferType, PaymentMethod, WalletStatus


class CreateWalletRequest(BaseModel):
    """Wallet creation request"""
    owner_name: str = Field(..., min_length=1)
    phone_number: str = Field(..., description="Phone number, +2126XXXXXXXX")
    initial_balance: Decimal = Decimal("0")
    currency: CurrencyType = CurrencyType.MAD
    offer_id: Optional[UUID] = None
    cin_number: Optional[str] = Field(None, description="National ID, triggers basic KYC when well-formed")
    email: Optional[str] = None


class UpdateWalletRequest(BaseModel):
    """Partial wallet update; unset fields are left untouched"""
    owner_name: Optional[str] = None
    phone_number: Optional[str] = None
    offer_id: Optional[UUID] = None
    status: Optional[WalletStatus] = None
    kyc_level: Optional[KycLevel] = None
    cin_number: Optional[str] = None


class GetWalletsRequest(BaseModel):
    """Wallet listing filters"""
    owner_name: Optional[str] = None
    offer_id: Optional[UUID] = None
    min_balance: Optional[Decimal] = None
    max_balance: Optional[Decimal] = None
    status: Optional[WalletStatus] = None
    kyc_level: Optional[KycLevel] = None
    page_number: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)


class AssignOfferRequest(BaseModel):
    offer_id: UUID


class DepositRequest(BaseModel):
    """Deposit request; card or mobile fields depending on the method"""
    amount: Decimal
    payment_method: PaymentMethod
    description: Optional[str] = None

    # Card payments
    card_number: Optional[str] = None
    card_holder_name: Optional[str] = None
    expiry_date: Optional[str] = None
    cvv: Optional[str] = None

    # Mobile money
    mobile_operator_reference: Optional[str] = None


class WithdrawalRequest(BaseModel):
    """Withdrawal request; bank or mobile fields depending on the method"""
    amount: Decimal
    payment_method: PaymentMethod
    description: Optional[str] = None

    # Bank withdrawals
    bank_account_number: Optional[str] = None
    bank_name: Optional[str] = None

    # Mobile money withdrawals
    recipient_phone_number: Optional[str] = None


class TransferRequest(BaseModel):
    """Wallet to wallet transfer"""
    source_wallet_id: UUID
    destination_wallet_id: UUID
    amount: Decimal
    description: Optional[str] = None
    otp_code: Optional[str] = Field(None, description="One-time code, required above the step-up threshold")


class PayBillRequest(BaseModel):
    """Bill payment request"""
    biller_name: str
    biller_reference: str
    customer_reference: str
    amount: Decimal
    bill_type: str = Field(..., description="telecom, water, electricity, taxes, ...")


class CreateOfferRequest(BaseModel):
    """Offer creation/update request"""
    name: str
    description: str
    type: OfferType
    spending_limit: Decimal
    valid_from: datetime
    valid_to: datetime
    cashback_percentage: Optional[Decimal] = None
    fees_discount: Optional[Decimal] = None
    recharge_bonus: Optional[Decimal] = None


class BasicVerificationRequest(BaseModel):
    cin_number: str


class VerifyIdentityRequest(BaseModel):
    """Full identity verification; images are base64 encoded"""
    cin_number: str
    full_name: str
    date_of_birth: date
    address: Optional[str] = None
    city: Optional[str] = None
    cin_front_image: Optional[str] = None
    cin_back_image: Optional[str] = None
    selfie_image: Optional[str] = None


class UpgradeKycRequest(BaseModel):
    new_level: KycLevel
