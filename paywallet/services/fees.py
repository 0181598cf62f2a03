"""
Fee and bonus calculation for wallet operations.

All functions here are pure: they read the (optional) offer linked to the
wallet and never touch the database. Rates live in lookup tables keyed by
payment method or bill category so a new method is a data change only.

Amounts are rounded to cents with ROUND_HALF_UP, once, after any discount.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional

from paywallet.models.enums import OfferType, PaymentMethod, TransactionType
from paywallet.models.offer import Offer

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

DEPOSIT_FEE_RATES: Dict[PaymentMethod, Decimal] = {
    PaymentMethod.CREDIT_CARD: Decimal("0.015"),
    PaymentMethod.BANK_TRANSFER: Decimal("0.005"),
    PaymentMethod.ORANGE_MONEY: Decimal("0.01"),
    PaymentMethod.INWI_MONEY: Decimal("0.01"),
}
DEFAULT_DEPOSIT_FEE_RATE = Decimal("0.02")

WITHDRAWAL_FEE_RATES: Dict[PaymentMethod, Decimal] = {
    PaymentMethod.BANK_TRANSFER: Decimal("0.01"),
    PaymentMethod.ORANGE_MONEY: Decimal("0.015"),
    PaymentMethod.INWI_MONEY: Decimal("0.015"),
    PaymentMethod.CASH: Decimal("0.02"),
}
DEFAULT_WITHDRAWAL_FEE_RATE = Decimal("0.02")

TRANSFER_FEE_RATE = Decimal("0.01")

# Keys are lower-cased bill categories, French and English spellings
BILL_FEE_RATES: Dict[str, Decimal] = {
    "telecom": Decimal("0.01"),
    "eau": Decimal("0.005"),
    "water": Decimal("0.005"),
    "électricité": Decimal("0.005"),
    "electricite": Decimal("0.005"),
    "electricity": Decimal("0.005"),
    "taxes": Decimal("0.015"),
}
DEFAULT_BILL_FEE_RATE = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half up"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def deposit_fee_rate(method: Optional[PaymentMethod]) -> Decimal:
    return DEPOSIT_FEE_RATES.get(method, DEFAULT_DEPOSIT_FEE_RATE)


def withdrawal_fee_rate(method: Optional[PaymentMethod]) -> Decimal:
    return WITHDRAWAL_FEE_RATES.get(method, DEFAULT_WITHDRAWAL_FEE_RATE)


def bill_fee_rate(bill_type: Optional[str]) -> Decimal:
    key = (bill_type or "").strip().lower()
    return BILL_FEE_RATES.get(key, DEFAULT_BILL_FEE_RATE)


def _offer_in_effect(offer: Optional[Offer], now: Optional[datetime]) -> bool:
    return offer is not None and offer.is_in_effect(now)


def _apply_discount(base_fee: Decimal, offer: Optional[Offer], now: Optional[datetime]) -> Decimal:
    """
    Reduce a raw fee by the offer's fees discount.

    Any offer type may carry a fees discount; only the offer being in effect
    (active and not expired) matters. A discount outside (0, 100] is ignored,
    so an offer never raises a fee.
    """
    if not _offer_in_effect(offer, now) or offer.fees_discount is None:
        return base_fee
    discount = Decimal(offer.fees_discount)
    if discount <= 0 or discount > HUNDRED:
        return base_fee
    return base_fee - base_fee * (discount / HUNDRED)


def calculate_fee(
    operation: TransactionType,
    amount: Decimal,
    method: Optional[PaymentMethod] = None,
    bill_type: Optional[str] = None,
    offer: Optional[Offer] = None,
    now: Optional[datetime] = None
) -> Decimal:
    """
    Calculate the fee for one operation.

    Args:
        operation: DEPOSIT, WITHDRAWAL, TRANSFER or BILL_PAYMENT
        amount: Requested amount
        method: Payment method (deposits and withdrawals)
        bill_type: Bill category (bill payments)
        offer: Offer linked to the wallet, if any
        now: Reference time for offer validity (defaults to current UTC time)

    Returns:
        Fee rounded to cents, never negative. Unknown methods and bill
        categories fall back to the default rate of their table.
    """
    if operation == TransactionType.DEPOSIT:
        rate = deposit_fee_rate(method)
    elif operation == TransactionType.WITHDRAWAL:
        rate = withdrawal_fee_rate(method)
    elif operation == TransactionType.BILL_PAYMENT:
        rate = bill_fee_rate(bill_type)
    else:
        rate = TRANSFER_FEE_RATE

    fee = _apply_discount(Decimal(amount) * rate, offer, now)
    return max(round_money(fee), Decimal("0.00"))


def deposit_bonus(amount: Decimal, offer: Optional[Offer], now: Optional[datetime] = None) -> Decimal:
    """
    Bonus credited on top of a deposit.

    Zero unless the linked offer is a recharge bonus offer currently in effect.
    """
    if (
        _offer_in_effect(offer, now)
        and offer.type == OfferType.RECHARGE_BONUS
        and offer.recharge_bonus is not None
    ):
        return round_money(Decimal(amount) * (Decimal(offer.recharge_bonus) / HUNDRED))
    return Decimal("0.00")
