"""
Wallet API endpoints
"""

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from paywallet.api.dependencies import get_wallet_service
from paywallet.core.auth import get_current_user
from paywallet.models.user import User
from paywallet.schemas.requests import AssignOfferRequest, CreateWalletRequest, GetWalletsRequest, UpdateWalletRequest
from paywallet.schemas.responses import PagedResponse, WalletResponse
from paywallet.services.wallet_service import WalletService

router = APIRouter()


class BalanceResponse(BaseModel):
    """Wallet balance response model"""
    wallet_id: UUID
    balance: Decimal


@router.post("/wallets", response_model=WalletResponse, status_code=status.HTTP_201_CREATED)
async def create_wallet(
    request: CreateWalletRequest,
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service)
):
    """Create a wallet owned by the current user."""
    return await service.create_wallet(request, current_user.id)


@router.get("/wallets", response_model=PagedResponse[WalletResponse])
async def list_wallets(
    filters: GetWalletsRequest = Depends(),
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service)
):
    """List wallets; admins see every wallet, users only their own."""
    return await service.get_wallets(filters, current_user.id)


@router.get("/wallets/{wallet_id}", response_model=WalletResponse)
async def get_wallet(
    wallet_id: UUID,
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service)
):
    return await service.get_wallet_by_id(wallet_id, current_user.id)


@router.get("/wallets/{wallet_id}/balance", response_model=BalanceResponse)
async def get_wallet_balance(
    wallet_id: UUID,
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service)
):
    balance = await service.get_wallet_balance(wallet_id, current_user.id)
    return BalanceResponse(wallet_id=wallet_id, balance=balance)


@router.put("/wallets/{wallet_id}", response_model=WalletResponse)
async def update_wallet(
    wallet_id: UUID,
    request: UpdateWalletRequest,
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service)
):
    return await service.update_wallet(wallet_id, request, current_user.id)


@router.delete("/wallets/{wallet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_wallet(
    wallet_id: UUID,
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service)
):
    await service.delete_wallet(wallet_id, current_user.id)


@router.post("/wallets/{wallet_id}/offer", response_model=WalletResponse)
async def assign_offer(
    wallet_id: UUID,
    request: AssignOfferRequest,
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service)
):
    return await service.assign_offer(wallet_id, request.offer_id, current_user.id)
