"""
Spending limit and KYC tier policy.

Limits are fully determined by the wallet's KYC tier. Usage counters are reset
lazily: before any limit check or balance read, the date of the wallet's last
successful transaction is compared with "now" and the daily/monthly counters
are zeroed when a calendar day/month boundary was crossed.

Checks return ``(ok, error)`` tuples; callers decide whether to raise.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.core.clock import as_naive_utc, utcnow
from paywallet.core.errors import (
    BusinessRuleError,
    InsufficientBalanceError,
    OfferLimitExceededError,
    WalletError,
)
from paywallet.models.enums import KycLevel, WalletStatus
from paywallet.models.offer import Offer
from paywallet.models.wallet import Wallet
from paywallet.repos.wallet_repo import get_last_transaction_date

logger = logging.getLogger(__name__)

# tier -> (daily limit, monthly limit)
KYC_LIMITS: Dict[KycLevel, Tuple[Decimal, Decimal]] = {
    KycLevel.NONE: (Decimal("1000"), Decimal("5000")),
    KycLevel.BASIC: (Decimal("5000"), Decimal("20000")),
    KycLevel.STANDARD: (Decimal("10000"), Decimal("50000")),
    KycLevel.ADVANCED: (Decimal("20000"), Decimal("100000")),
}


def limits_for_level(level: KycLevel) -> Tuple[Decimal, Decimal]:
    return KYC_LIMITS[level]


def apply_kyc_level(wallet: Wallet, level: KycLevel) -> None:
    """Set the wallet's tier and re-derive both limits from it"""
    daily, monthly = limits_for_level(level)
    wallet.kyc_level = level
    wallet.daily_limit = daily
    wallet.monthly_limit = monthly


def usage_resets_due(last_transaction: Optional[datetime], now: datetime) -> Tuple[bool, bool]:
    """
    Work out which usage counters are stale.

    Args:
        last_transaction: Time of the wallet's last successful transaction
        now: Reference time

    Returns:
        (reset_daily, reset_monthly)
    """
    if last_transaction is None:
        return False, False
    last_transaction = as_naive_utc(last_transaction)
    reset_daily = last_transaction.date() < now.date()
    first_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    reset_monthly = last_transaction < first_of_month
    return reset_daily, reset_monthly


async def reset_usage_if_rolled_over(
    session: AsyncSession,
    wallet: Wallet,
    now: Optional[datetime] = None
) -> bool:
    """
    Zero the usage counters that belong to an earlier day or month.

    Each reset is written to the session immediately (flushed); the caller's
    commit or rollback decides whether it sticks.

    Args:
        session: Database session
        wallet: Wallet to refresh, ideally row-locked by the caller
        now: Reference time (defaults to current UTC time)

    Returns:
        True if any counter was reset
    """
    now = as_naive_utc(now) if now else utcnow()
    last_transaction = await get_last_transaction_date(session, wallet.id)
    reset_daily, reset_monthly = usage_resets_due(last_transaction, now)

    if reset_daily and wallet.current_daily_usage:
        wallet.current_daily_usage = Decimal("0")
        wallet.updated_at = now
        await session.flush()
        logger.info(f"Daily usage reset for wallet {wallet.id}")

    if reset_monthly and wallet.current_monthly_usage:
        wallet.current_monthly_usage = Decimal("0")
        wallet.updated_at = now
        await session.flush()
        logger.info(f"Monthly usage reset for wallet {wallet.id}")

    return reset_daily or reset_monthly


def check_can_transact(
    wallet: Wallet,
    amount: Decimal,
    offer: Optional[Offer] = None,
    now: Optional[datetime] = None
) -> Tuple[bool, Optional[WalletError]]:
    """
    Decide whether the wallet may be debited by ``amount``.

    Checks run in a fixed order and the first failure wins: status, balance,
    daily limit, monthly limit, then the linked offer's spending limit.
    Counters are expected to be fresh (see reset_usage_if_rolled_over).

    Args:
        wallet: Wallet to debit
        amount: Total debit, fee included
        offer: Offer linked to the wallet, if any
        now: Reference time for offer validity

    Returns:
        (True, None) when allowed, (False, error) otherwise
    """
    if wallet.status != WalletStatus.ACTIVE:
        return False, BusinessRuleError(f"Wallet is not active (status: {wallet.status.value})")

    if amount > wallet.balance:
        return False, InsufficientBalanceError(
            f"Insufficient balance: required {amount}, available {wallet.balance}"
        )

    if wallet.current_daily_usage + amount > wallet.daily_limit:
        return False, BusinessRuleError(
            f"Daily limit exceeded: limit {wallet.daily_limit}, used {wallet.current_daily_usage}"
        )

    if wallet.current_monthly_usage + amount > wallet.monthly_limit:
        return False, BusinessRuleError(
            f"Monthly limit exceeded: limit {wallet.monthly_limit}, used {wallet.current_monthly_usage}"
        )

    if offer is not None and offer.is_in_effect(now) and amount > offer.spending_limit:
        return False, OfferLimitExceededError(
            f"Amount exceeds the offer spending limit of {offer.spending_limit}"
        )

    return True, None


async def can_transact(
    session: AsyncSession,
    wallet: Wallet,
    amount: Decimal,
    offer: Optional[Offer] = None,
    now: Optional[datetime] = None
) -> Tuple[bool, Optional[WalletError]]:
    """Refresh the usage counters, then run check_can_transact"""
    await reset_usage_if_rolled_over(session, wallet, now)
    return check_can_transact(wallet, amount, offer, now)


def record_debit(wallet: Wallet, amount: Decimal) -> None:
    """Debit the balance and count the amount against both usage counters"""
    wallet.balance -= amount
    wallet.current_daily_usage += amount
    wallet.current_monthly_usage += amount


def check_kyc_upgrade(wallet: Wallet, new_level: KycLevel) -> Tuple[bool, Optional[WalletError]]:
    """
    Validate a tier change: strictly upward, and ADVANCED only for wallets
    whose identity has been verified.
    """
    if new_level.rank <= wallet.kyc_level.rank:
        return False, BusinessRuleError(
            f"KYC level can only be upgraded (current: {wallet.kyc_level.value}, requested: {new_level.value})"
        )

    if new_level == KycLevel.ADVANCED and not wallet.is_identity_verified:
        return False, BusinessRuleError("Identity must be verified before upgrading to the advanced KYC level")

    return True, None
