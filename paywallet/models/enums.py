"""
Database enums for wallets, offers and transactions
"""

import enum


class WalletStatus(enum.Enum):
    """Wallet status enum"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


class KycLevel(enum.Enum):
    """KYC tier enum, declared from lowest to highest"""
    NONE = "none"
    BASIC = "basic"
    STANDARD = "standard"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return list(KycLevel).index(self)


class CurrencyType(enum.Enum):
    """Supported wallet currencies"""
    MAD = "MAD"
    EUR = "EUR"
    USD = "USD"


class TransactionType(enum.Enum):
    """Transaction type enum"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"
    BILL_PAYMENT = "bill_payment"
    FEE = "fee"
    BONUS = "bonus"


class PaymentMethod(enum.Enum):
    """Payment method enum"""
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    ORANGE_MONEY = "orange_money"
    INWI_MONEY = "inwi_money"
    CASH = "cash"


class OfferType(enum.Enum):
    """Offer type enum"""
    CASHBACK = "cashback"
    REDUCED_FEES = "reduced_fees"
    RECHARGE_BONUS = "recharge_bonus"


class UserRole(enum.Enum):
    """User role enum"""
    USER = "user"
    ADMIN = "admin"
