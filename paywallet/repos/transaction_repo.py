"""
Transaction and bill repository.

Transactions are append-only: there is no update or delete here.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.models.bill import Bill
from paywallet.models.enums import TransactionType
from paywallet.models.transaction import Transaction


async def add_transaction(session: AsyncSession, transaction: Transaction) -> Transaction:
    """
    Stage a transaction row in the current unit of work.

    Args:
        session: Database session
        transaction: Transaction to persist

    Returns:
        The same Transaction, flushed so its id and created_at are set
    """
    session.add(transaction)
    await session.flush()
    return transaction


async def add_bill(session: AsyncSession, bill: Bill) -> Bill:
    session.add(bill)
    await session.flush()
    return bill


async def get_transaction_by_id(session: AsyncSession, transaction_id: UUID) -> Optional[Transaction]:
    """
    Get transaction by ID.

    Args:
        session: Database session
        transaction_id: Transaction UUID

    Returns:
        Transaction instance or None if not found
    """
    result = await session.execute(
        select(Transaction).where(Transaction.id == transaction_id)
    )
    return result.scalar_one_or_none()


async def get_bill_by_id(session: AsyncSession, bill_id: UUID) -> Optional[Bill]:
    result = await session.execute(select(Bill).where(Bill.id == bill_id))
    return result.scalar_one_or_none()


async def get_bills_by_ids(session: AsyncSession, bill_ids: List[UUID]) -> dict:
    """Load the bills linked to a page of transactions, keyed by id"""
    if not bill_ids:
        return {}
    result = await session.execute(select(Bill).where(Bill.id.in_(set(bill_ids))))
    return {bill.id: bill for bill in result.scalars().all()}


def _apply_transaction_filters(
    query,
    wallet_id: UUID,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    tx_type: Optional[TransactionType] = None
):
    # Incoming transfers belong to the destination wallet's history too
    query = query.where(
        or_(Transaction.wallet_id == wallet_id, Transaction.destination_wallet_id == wallet_id)
    )
    if start_date is not None:
        query = query.where(Transaction.created_at >= start_date)
    if end_date is not None:
        query = query.where(Transaction.created_at <= end_date)
    if tx_type is not None:
        query = query.where(Transaction.type == tx_type)
    return query


async def get_transactions(
    session: AsyncSession,
    wallet_id: UUID,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    tx_type: Optional[TransactionType] = None,
    page_number: int = 1,
    page_size: int = 10
) -> List[Transaction]:
    """
    Get a page of a wallet's transactions, newest first.

    Args:
        session: Database session
        wallet_id: Wallet UUID, matched as source or transfer destination
        start_date: Inclusive lower bound on created_at (optional)
        end_date: Inclusive upper bound on created_at (optional)
        tx_type: Restrict to one transaction type (optional)
        page_number: 1-based page number
        page_size: Page size

    Returns:
        List of Transaction instances
    """
    query = _apply_transaction_filters(select(Transaction), wallet_id, start_date, end_date, tx_type)
    result = await session.execute(
        query
        .order_by(desc(Transaction.created_at))
        .limit(page_size)
        .offset((page_number - 1) * page_size)
    )
    return list(result.scalars().all())


async def count_transactions(
    session: AsyncSession,
    wallet_id: UUID,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    tx_type: Optional[TransactionType] = None
) -> int:
    query = _apply_transaction_filters(
        select(func.count(Transaction.id)), wallet_id, start_date, end_date, tx_type
    )
    result = await session.execute(query)
    return result.scalar_one()


async def get_transactions_for_wallet(session: AsyncSession, wallet_id: UUID) -> List[Transaction]:
    """All rows written with this wallet as source, oldest first"""
    result = await session.execute(
        select(Transaction)
        .where(Transaction.wallet_id == wallet_id)
        .order_by(Transaction.created_at)
    )
    return list(result.scalars().all())
