"""
Offer administration
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.core.clock import as_naive_utc, utcnow
from paywallet.core.errors import BusinessRuleError, NotFoundError, ValidationError
from paywallet.models.enums import OfferType
from paywallet.models.offer import Offer
from paywallet.repos import offer_repo
from paywallet.schemas.requests import CreateOfferRequest
from paywallet.schemas.responses import OfferResponse, PagedResponse, WalletResponse
from paywallet.services.access import require_admin

logger = logging.getLogger(__name__)

# Offer type -> (request field that must be set, label for messages)
OFFER_PERCENTAGE_FIELDS = {
    OfferType.CASHBACK: ("cashback_percentage", "Cashback percentage"),
    OfferType.REDUCED_FEES: ("fees_discount", "Fees discount"),
    OfferType.RECHARGE_BONUS: ("recharge_bonus", "Recharge bonus"),
}


def validate_offer_request(request: CreateOfferRequest) -> Tuple[bool, Optional[str]]:
    """
    Check an offer definition.

    Returns:
        (True, None) if valid, (False, reason) otherwise
    """
    if not request.name or not request.name.strip():
        return False, "Offer name is required"
    if not request.description or not request.description.strip():
        return False, "Offer description is required"
    if request.spending_limit is None or request.spending_limit <= 0:
        return False, "Spending limit must be positive"
    if as_naive_utc(request.valid_from) >= as_naive_utc(request.valid_to):
        return False, "Start date must be before end date"

    field, label = OFFER_PERCENTAGE_FIELDS[request.type]
    value = getattr(request, field)
    if value is None or value <= 0 or value > Decimal("100"):
        return False, f"{label} must be greater than 0 and at most 100"

    for other_field, other_label in OFFER_PERCENTAGE_FIELDS.values():
        if other_field != field and getattr(request, other_field) is not None:
            return False, f"{other_label} cannot be set on a {request.type.value} offer"

    return True, None


class OfferService:
    """Offer operations for one database session; changes need an admin"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _load(self, offer_id: UUID) -> Offer:
        offer = await offer_repo.get_offer_by_id(self.session, offer_id)
        if offer is None:
            raise NotFoundError(f"Offer {offer_id} does not exist")
        return offer

    @staticmethod
    def _apply(offer: Offer, request: CreateOfferRequest) -> None:
        offer.name = request.name
        offer.description = request.description
        offer.type = request.type
        offer.spending_limit = request.spending_limit
        offer.valid_from = as_naive_utc(request.valid_from)
        offer.valid_to = as_naive_utc(request.valid_to)
        offer.cashback_percentage = request.cashback_percentage
        offer.fees_discount = request.fees_discount
        offer.recharge_bonus = request.recharge_bonus

    async def create_offer(self, request: CreateOfferRequest, caller_id: Optional[UUID] = None) -> OfferResponse:
        logger.info(f"Creating new offer: {request.name}")
        await require_admin(self.session, caller_id, "create offers")

        valid, reason = validate_offer_request(request)
        if not valid:
            raise ValidationError(reason)

        try:
            offer = Offer(is_active=True, created_at=utcnow())
            self._apply(offer, request)
            await offer_repo.add_offer(self.session, offer)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Offer {offer.id} created")
        return OfferResponse.model_validate(offer)

    async def get_offer(self, offer_id: UUID) -> OfferResponse:
        return OfferResponse.model_validate(await self._load(offer_id))

    async def update_offer(
        self,
        offer_id: UUID,
        request: CreateOfferRequest,
        caller_id: Optional[UUID] = None
    ) -> OfferResponse:
        logger.info(f"Updating offer {offer_id}")
        await require_admin(self.session, caller_id, "update offers")
        offer = await self._load(offer_id)

        valid, reason = validate_offer_request(request)
        if not valid:
            raise ValidationError(reason)

        try:
            self._apply(offer, request)
            offer.updated_at = utcnow()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return OfferResponse.model_validate(offer)

    async def delete_offer(self, offer_id: UUID, caller_id: Optional[UUID] = None) -> bool:
        """Delete an offer no wallet refers to"""
        logger.info(f"Deleting offer {offer_id}")
        await require_admin(self.session, caller_id, "delete offers")
        await self._load(offer_id)

        wallets_count = await offer_repo.count_wallets_by_offer_id(self.session, offer_id)
        if wallets_count > 0:
            raise BusinessRuleError(f"Cannot delete this offer, it is used by {wallets_count} wallet(s)")

        try:
            await offer_repo.delete_offer(self.session, offer_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return True

    async def get_offers(
        self,
        active_only: bool = False,
        offer_type: Optional[OfferType] = None,
        page_number: int = 1,
        page_size: int = 10
    ) -> PagedResponse[OfferResponse]:
        offers = await offer_repo.get_offers(self.session, active_only, offer_type, page_number, page_size)
        total_count = await offer_repo.count_offers(self.session, active_only, offer_type)
        items = [OfferResponse.model_validate(o) for o in offers]
        return PagedResponse[OfferResponse].build(items, page_number, page_size, total_count)

    async def get_wallets_by_offer(
        self,
        offer_id: UUID,
        page_number: int = 1,
        page_size: int = 10,
        caller_id: Optional[UUID] = None
    ) -> PagedResponse[WalletResponse]:
        await require_admin(self.session, caller_id, "list wallets by offer")
        offer = await self._load(offer_id)

        wallets = await offer_repo.get_wallets_by_offer(self.session, offer_id, page_number, page_size)
        total_count = await offer_repo.count_wallets_by_offer_id(self.session, offer_id)
        offer_response = OfferResponse.model_validate(offer)
        items = [
            WalletResponse.model_validate(w).model_copy(update={"offer": offer_response})
            for w in wallets
        ]
        return PagedResponse[WalletResponse].build(items, page_number, page_size, total_count)

    async def activate_offer(self, offer_id: UUID, caller_id: Optional[UUID] = None) -> OfferResponse:
        """Activate an unexpired offer; already active offers are returned unchanged"""
        logger.info(f"Activating offer {offer_id}")
        await require_admin(self.session, caller_id, "activate offers")
        offer = await self._load(offer_id)

        if offer.is_active:
            logger.info(f"Offer {offer_id} is already active")
            return OfferResponse.model_validate(offer)

        if offer.valid_to < utcnow():
            raise BusinessRuleError("Cannot activate an expired offer")

        try:
            offer.is_active = True
            offer.updated_at = utcnow()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return OfferResponse.model_validate(offer)

    async def deactivate_offer(self, offer_id: UUID, caller_id: Optional[UUID] = None) -> OfferResponse:
        logger.info(f"Deactivating offer {offer_id}")
        await require_admin(self.session, caller_id, "deactivate offers")
        offer = await self._load(offer_id)

        if not offer.is_active:
            logger.info(f"Offer {offer_id} is already inactive")
            return OfferResponse.model_validate(offer)

        try:
            offer.is_active = False
            offer.updated_at = utcnow()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return OfferResponse.model_validate(offer)
