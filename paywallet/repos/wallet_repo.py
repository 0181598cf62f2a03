"""
Wallet repository with row-locked reads for balance mutations
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.core.clock import utcnow
from paywallet.models.enums import KycLevel, WalletStatus
from paywallet.models.transaction import Transaction
from paywallet.models.wallet import Wallet

# Configure logging
logger = logging.getLogger(__name__)

# Transactions newer than this keep a wallet from being deleted
RECENT_ACTIVITY_WINDOW = timedelta(days=30)


async def get_wallet_by_id(session: AsyncSession, wallet_id: UUID) -> Optional[Wallet]:
    """
    Get wallet by ID without locking.

    Args:
        session: Database session
        wallet_id: Wallet UUID

    Returns:
        Wallet instance or None if not found
    """
    result = await session.execute(
        select(Wallet)
        .where(Wallet.id == wallet_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_wallet_for_update(session: AsyncSession, wallet_id: UUID) -> Optional[Wallet]:
    """
    Get wallet by ID and lock its row until the session's transaction ends.

    Uses SELECT FOR UPDATE so concurrent debits on the same wallet serialize
    instead of both passing the limit check against a stale balance.

    Args:
        session: Database session
        wallet_id: Wallet UUID

    Returns:
        Locked Wallet instance or None if not found
    """
    result = await session.execute(
        select(Wallet)
        .where(Wallet.id == wallet_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def lock_wallets_in_order(session: AsyncSession, wallet_ids: Sequence[UUID]) -> dict:
    """
    Lock several wallet rows, always in ascending id order to avoid deadlocks.

    Args:
        session: Database session
        wallet_ids: Wallet UUIDs to lock

    Returns:
        Dict of wallet id -> Wallet (missing wallets are absent)
    """
    locked = {}
    for wallet_id in sorted(set(wallet_ids), key=str):
        wallet = await get_wallet_for_update(session, wallet_id)
        if wallet is not None:
            locked[wallet_id] = wallet
    return locked


async def add_wallet(session: AsyncSession, wallet: Wallet) -> Wallet:
    """Stage a new wallet and flush it so its id is usable."""
    session.add(wallet)
    await session.flush()
    return wallet


async def delete_wallet(session: AsyncSession, wallet_id: UUID) -> None:
    await session.execute(delete(Wallet).where(Wallet.id == wallet_id))


def _apply_wallet_filters(
    query,
    owner_id: Optional[UUID] = None,
    owner_name: Optional[str] = None,
    offer_id: Optional[UUID] = None,
    min_balance: Optional[Decimal] = None,
    max_balance: Optional[Decimal] = None,
    status: Optional[WalletStatus] = None,
    kyc_level: Optional[KycLevel] = None
):
    if owner_id is not None:
        query = query.where(Wallet.owner_id == owner_id)
    if owner_name:
        query = query.where(Wallet.owner_name.ilike(f"%{owner_name}%"))
    if offer_id is not None:
        query = query.where(Wallet.offer_id == offer_id)
    if min_balance is not None:
        query = query.where(Wallet.balance >= min_balance)
    if max_balance is not None:
        query = query.where(Wallet.balance <= max_balance)
    if status is not None:
        query = query.where(Wallet.status == status)
    if kyc_level is not None:
        query = query.where(Wallet.kyc_level == kyc_level)
    return query


async def get_wallets(
    session: AsyncSession,
    page_number: int = 1,
    page_size: int = 10,
    **filters
) -> List[Wallet]:
    """
    Get a page of wallets matching the filters, newest first.

    Args:
        session: Database session
        page_number: 1-based page number
        page_size: Page size
        **filters: owner_id, owner_name, offer_id, min_balance, max_balance,
            status, kyc_level

    Returns:
        List of Wallet instances
    """
    query = _apply_wallet_filters(select(Wallet), **filters)
    result = await session.execute(
        query
        .order_by(desc(Wallet.created_at))
        .limit(page_size)
        .offset((page_number - 1) * page_size)
    )
    return list(result.scalars().all())


async def count_wallets(session: AsyncSession, **filters) -> int:
    query = _apply_wallet_filters(select(func.count(Wallet.id)), **filters)
    result = await session.execute(query)
    return result.scalar_one()


async def get_last_transaction_date(session: AsyncSession, wallet_id: UUID) -> Optional[datetime]:
    """
    Get the creation time of the wallet's latest successful transaction.

    Args:
        session: Database session
        wallet_id: Wallet UUID

    Returns:
        Datetime or None when the wallet has no successful transaction
    """
    result = await session.execute(
        select(func.max(Transaction.created_at))
        .where(Transaction.wallet_id == wallet_id)
        .where(Transaction.is_successful.is_(True))
    )
    return result.scalar_one_or_none()


async def has_active_transactions(
    session: AsyncSession,
    wallet_id: UUID,
    now: Optional[datetime] = None
) -> bool:
    """True when the wallet has any transaction within the recent-activity window."""
    since = (now or utcnow()) - RECENT_ACTIVITY_WINDOW
    result = await session.execute(
        select(func.count(Transaction.id))
        .where(Transaction.wallet_id == wallet_id)
        .where(Transaction.created_at >= since)
    )
    return result.scalar_one() > 0
