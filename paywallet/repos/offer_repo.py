"""
Offer repository with CRUD operations
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.models.enums import OfferType
from paywallet.models.offer import Offer
from paywallet.models.wallet import Wallet


async def get_offer_by_id(session: AsyncSession, offer_id: UUID) -> Optional[Offer]:
    """
    Get offer by ID.

    Args:
        session: Database session
        offer_id: Offer UUID

    Returns:
        Offer instance or None if not found
    """
    result = await session.execute(
        select(Offer).where(Offer.id == offer_id)
    )
    return result.scalar_one_or_none()


async def get_offers_by_ids(session: AsyncSession, offer_ids: List[UUID]) -> dict:
    """Load several offers at once, keyed by id"""
    if not offer_ids:
        return {}
    result = await session.execute(
        select(Offer).where(Offer.id.in_(set(offer_ids)))
    )
    return {offer.id: offer for offer in result.scalars().all()}


async def add_offer(session: AsyncSession, offer: Offer) -> Offer:
    session.add(offer)
    await session.flush()
    return offer


async def delete_offer(session: AsyncSession, offer_id: UUID) -> None:
    await session.execute(delete(Offer).where(Offer.id == offer_id))


def _apply_offer_filters(query, active_only: bool = False, offer_type: Optional[OfferType] = None):
    if active_only:
        query = query.where(Offer.is_active.is_(True))
    if offer_type is not None:
        query = query.where(Offer.type == offer_type)
    return query


async def get_offers(
    session: AsyncSession,
    active_only: bool = False,
    offer_type: Optional[OfferType] = None,
    page_number: int = 1,
    page_size: int = 10
) -> List[Offer]:
    """
    Get a page of offers, newest first.

    Args:
        session: Database session
        active_only: Only offers with the active flag set
        offer_type: Restrict to one offer type (optional)
        page_number: 1-based page number
        page_size: Page size

    Returns:
        List of Offer instances
    """
    query = _apply_offer_filters(select(Offer), active_only, offer_type)
    result = await session.execute(
        query
        .order_by(desc(Offer.created_at))
        .limit(page_size)
        .offset((page_number - 1) * page_size)
    )
    return list(result.scalars().all())


async def count_offers(
    session: AsyncSession,
    active_only: bool = False,
    offer_type: Optional[OfferType] = None
) -> int:
    query = _apply_offer_filters(select(func.count(Offer.id)), active_only, offer_type)
    result = await session.execute(query)
    return result.scalar_one()


async def get_wallets_by_offer(
    session: AsyncSession,
    offer_id: UUID,
    page_number: int = 1,
    page_size: int = 10
) -> List[Wallet]:
    """Wallets currently linked to an offer, newest first"""
    result = await session.execute(
        select(Wallet)
        .where(Wallet.offer_id == offer_id)
        .order_by(desc(Wallet.created_at))
        .limit(page_size)
        .offset((page_number - 1) * page_size)
    )
    return list(result.scalars().all())


async def count_wallets_by_offer_id(session: AsyncSession, offer_id: UUID) -> int:
    result = await session.execute(
        select(func.count(Wallet.id)).where(Wallet.offer_id == offer_id)
    )
    return result.scalar_one()
