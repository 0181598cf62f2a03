"""
Transaction API endpoints: deposits, withdrawals, transfers, bill payments
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from paywallet.api.dependencies import get_transaction_engine
from paywallet.core.auth import get_current_user
from paywallet.models.enums import TransactionType
from paywallet.models.user import User
from paywallet.schemas.requests import DepositRequest, PayBillRequest, TransferRequest, WithdrawalRequest
from paywallet.schemas.responses import PagedResponse, TransactionResponse
from paywallet.services.notification import get_notifier, notify_user
from paywallet.services.otp import get_otp_verifier
from paywallet.services.transaction_engine import TransactionEngine

router = APIRouter()


class OtpIssuedResponse(BaseModel):
    message: str


@router.post("/wallets/{wallet_id}/deposits", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def deposit(
    wallet_id: UUID,
    request: DepositRequest,
    current_user: User = Depends(get_current_user),
    engine: TransactionEngine = Depends(get_transaction_engine)
):
    """Deposit into a wallet. A failed settlement still answers 201 with is_successful=false."""
    return await engine.deposit(wallet_id, request, current_user.id)


@router.post("/wallets/{wallet_id}/withdrawals", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def withdraw(
    wallet_id: UUID,
    request: WithdrawalRequest,
    current_user: User = Depends(get_current_user),
    engine: TransactionEngine = Depends(get_transaction_engine)
):
    return await engine.withdraw(wallet_id, request, current_user.id)


@router.post("/transfers", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def transfer(
    request: TransferRequest,
    current_user: User = Depends(get_current_user),
    engine: TransactionEngine = Depends(get_transaction_engine)
):
    return await engine.transfer(request, current_user.id)


@router.post("/wallets/{wallet_id}/bills", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def pay_bill(
    wallet_id: UUID,
    request: PayBillRequest,
    current_user: User = Depends(get_current_user),
    engine: TransactionEngine = Depends(get_transaction_engine)
):
    return await engine.pay_bill(wallet_id, request, current_user.id)


@router.get("/wallets/{wallet_id}/transactions", response_model=PagedResponse[TransactionResponse])
async def list_transactions(
    wallet_id: UUID,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    type: Optional[TransactionType] = None,
    page_number: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    engine: TransactionEngine = Depends(get_transaction_engine)
):
    """Wallet history, newest first."""
    return await engine.get_wallet_transactions(
        wallet_id, current_user.id, start_date, end_date, type, page_number, page_size
    )


@router.post("/otp", response_model=OtpIssuedResponse, status_code=status.HTTP_201_CREATED)
async def request_transfer_code(current_user: User = Depends(get_current_user)):
    """Send the current user a one-time code for large transfers."""
    code = await get_otp_verifier().issue_code(current_user.id)
    await notify_user(get_notifier(), current_user.id, f"Your transfer confirmation code is {code}")
    return OtpIssuedResponse(message="A one-time code has been sent")
