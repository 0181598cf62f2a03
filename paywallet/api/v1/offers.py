"""
Offer API endpoints; changes are reserved to admins
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from paywallet.api.dependencies import get_offer_service
from paywallet.core.auth import get_current_user
from paywallet.models.enums import OfferType
from paywallet.models.user import User
from paywallet.schemas.requests import CreateOfferRequest
from paywallet.schemas.responses import OfferResponse, PagedResponse, WalletResponse
from paywallet.services.offer_service import OfferService

router = APIRouter()


@router.post("/offers", response_model=OfferResponse, status_code=status.HTTP_201_CREATED)
async def create_offer(
    request: CreateOfferRequest,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service)
):
    return await service.create_offer(request, current_user.id)


@router.get("/offers", response_model=PagedResponse[OfferResponse])
async def list_offers(
    active_only: bool = False,
    type: Optional[OfferType] = None,
    page_number: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service)
):
    return await service.get_offers(active_only, type, page_number, page_size)


@router.get("/offers/{offer_id}", response_model=OfferResponse)
async def get_offer(
    offer_id: UUID,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service)
):
    return await service.get_offer(offer_id)


@router.put("/offers/{offer_id}", response_model=OfferResponse)
async def update_offer(
    offer_id: UUID,
    request: CreateOfferRequest,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service)
):
    return await service.update_offer(offer_id, request, current_user.id)


@router.delete("/offers/{offer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_offer(
    offer_id: UUID,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service)
):
    await service.delete_offer(offer_id, current_user.id)


@router.get("/offers/{offer_id}/wallets", response_model=PagedResponse[WalletResponse])
async def list_offer_wallets(
    offer_id: UUID,
    page_number: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service)
):
    return await service.get_wallets_by_offer(offer_id, page_number, page_size, current_user.id)


@router.post("/offers/{offer_id}/activate", response_model=OfferResponse)
async def activate_offer(
    offer_id: UUID,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service)
):
    return await service.activate_offer(offer_id, current_user.id)


@router.post("/offers/{offer_id}/deactivate", response_model=OfferResponse)
async def deactivate_offer(
    offer_id: UUID,
    current_user: User = Depends(get_current_user),
    service: OfferService = Depends(get_offer_service)
):
    return await service.deactivate_offer(offer_id, current_user.id)
