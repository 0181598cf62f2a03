"""
FastAPI dependencies that build the services for a request
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.db.session import get_db
from paywallet.services.kyc import KycService
from paywallet.services.offer_service import OfferService
from paywallet.services.transaction_engine import TransactionEngine
from paywallet.services.wallet_service import WalletService


async def get_transaction_engine(session: AsyncSession = Depends(get_db)) -> TransactionEngine:
    return TransactionEngine(session)


async def get_kyc_service(session: AsyncSession = Depends(get_db)) -> KycService:
    return KycService(session)


async def get_wallet_service(session: AsyncSession = Depends(get_db)) -> WalletService:
    return WalletService(session, kyc_service=KycService(session))


async def get_offer_service(session: AsyncSession = Depends(get_db)) -> OfferService:
    return OfferService(session)
