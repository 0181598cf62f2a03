"""
KYC API endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from paywallet.api.dependencies import get_kyc_service
from paywallet.core.auth import get_current_user
from paywallet.models.user import User
from paywallet.schemas.requests import BasicVerificationRequest, UpgradeKycRequest, VerifyIdentityRequest
from paywallet.schemas.responses import KycVerificationStatus
from paywallet.services.kyc import KycService

router = APIRouter()


class KycResult(BaseModel):
    success: bool


@router.post("/wallets/{wallet_id}/kyc/basic", response_model=KycResult)
async def basic_verification(
    wallet_id: UUID,
    request: BasicVerificationRequest,
    current_user: User = Depends(get_current_user),
    service: KycService = Depends(get_kyc_service)
):
    """Record a CIN; success=false when its format is not recognised."""
    success = await service.initiate_basic_verification(wallet_id, request.cin_number, current_user.id)
    return KycResult(success=success)


@router.post("/wallets/{wallet_id}/kyc/identity", response_model=KycResult)
async def verify_identity(
    wallet_id: UUID,
    request: VerifyIdentityRequest,
    current_user: User = Depends(get_current_user),
    service: KycService = Depends(get_kyc_service)
):
    success = await service.verify_identity(wallet_id, request, current_user.id)
    return KycResult(success=success)


@router.post("/wallets/{wallet_id}/kyc/upgrade", response_model=KycResult)
async def upgrade_kyc_level(
    wallet_id: UUID,
    request: UpgradeKycRequest,
    current_user: User = Depends(get_current_user),
    service: KycService = Depends(get_kyc_service)
):
    """Admin only."""
    success = await service.upgrade_kyc_level(wallet_id, request.new_level, current_user.id)
    return KycResult(success=success)


@router.get("/wallets/{wallet_id}/kyc", response_model=KycVerificationStatus)
async def verification_status(
    wallet_id: UUID,
    current_user: User = Depends(get_current_user),
    service: KycService = Depends(get_kyc_service)
):
    return await service.check_verification_status(wallet_id, current_user.id)
