"""
Wallet lifecycle: creation, reads, updates, offer assignment and deletion
"""

import logging
import re
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.core.clock import utcnow
from paywallet.core.config import settings
from paywallet.core.errors import BusinessRuleError, NotFoundError, UnauthorizedError, ValidationError
from paywallet.models.enums import KycLevel, WalletStatus
from paywallet.models.offer import Offer
from paywallet.models.wallet import Wallet
from paywallet.repos import wallet_repo
from paywallet.repos.offer_repo import get_offer_by_id, get_offers_by_ids
from paywallet.repos.user_repo import is_admin
from paywallet.schemas.requests import CreateWalletRequest, GetWalletsRequest, UpdateWalletRequest
from paywallet.schemas.responses import OfferResponse, PagedResponse, WalletResponse
from paywallet.services.access import authorize_wallet_access
from paywallet.services.fees import round_money
from paywallet.services.kyc import KycService, is_valid_cin
from paywallet.services.limits import apply_kyc_level, check_can_transact, check_kyc_upgrade, reset_usage_if_rolled_over

logger = logging.getLogger(__name__)


def is_valid_phone_number(phone_number: Optional[str]) -> bool:
    return bool(phone_number) and re.match(settings.phone_number_pattern, phone_number) is not None


def _to_response(wallet: Wallet, offer: Optional[Offer] = None) -> WalletResponse:
    response = WalletResponse.model_validate(wallet)
    if offer is not None:
        response = response.model_copy(update={"offer": OfferResponse.model_validate(offer)})
    return response


class WalletService:
    """Wallet operations for one database session"""

    def __init__(self, session: AsyncSession, kyc_service: KycService = None):
        self.session = session
        self.kyc_service = kyc_service or KycService(session)

    async def _usable_offer(self, offer_id: UUID) -> Offer:
        """Offer that may be linked to a wallet right now"""
        offer = await get_offer_by_id(self.session, offer_id)
        if offer is None:
            raise NotFoundError(f"Offer {offer_id} does not exist")
        if not offer.is_in_effect():
            raise BusinessRuleError("The offer is not active or has expired")
        return offer

    async def _linked_offer(self, wallet: Wallet) -> Optional[Offer]:
        if wallet.offer_id is None:
            return None
        return await get_offer_by_id(self.session, wallet.offer_id)

    async def _load(self, wallet_id: UUID, for_update: bool = False) -> Wallet:
        if for_update:
            wallet = await wallet_repo.get_wallet_for_update(self.session, wallet_id)
        else:
            wallet = await wallet_repo.get_wallet_by_id(self.session, wallet_id)
        if wallet is None:
            raise NotFoundError(f"Wallet {wallet_id} does not exist")
        return wallet

    async def create_wallet(self, request: CreateWalletRequest, owner_id: UUID) -> WalletResponse:
        """
        Create a wallet for a user.

        A well-formed CIN starts the wallet at the basic tier; limits always
        follow the tier.

        Args:
            request: Wallet creation request
            owner_id: Authenticated user who will own the wallet

        Returns:
            WalletResponse
        """
        logger.info(f"Creating new wallet for user {owner_id}")

        if not is_valid_phone_number(request.phone_number):
            raise ValidationError("Phone number must use the +2126XXXXXXXX format")
        if request.initial_balance is None or request.initial_balance < 0:
            raise ValidationError("Initial balance cannot be negative")
        if request.initial_balance != round_money(request.initial_balance):
            raise ValidationError("Initial balance cannot have more than 2 decimal places")

        try:
            offer = None
            if request.offer_id is not None:
                offer = await self._usable_offer(request.offer_id)

            cin_accepted = is_valid_cin(request.cin_number)
            wallet = Wallet(
                owner_id=owner_id,
                owner_name=request.owner_name,
                phone_number=request.phone_number,
                balance=request.initial_balance,
                currency=request.currency,
                status=WalletStatus.ACTIVE,
                offer_id=request.offer_id,
                cin_number=request.cin_number if cin_accepted else None,
                is_identity_verified=False,
                current_daily_usage=Decimal("0"),
                current_monthly_usage=Decimal("0"),
                created_at=utcnow()
            )
            apply_kyc_level(wallet, KycLevel.BASIC if cin_accepted else KycLevel.NONE)
            await wallet_repo.add_wallet(self.session, wallet)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Wallet {wallet.id} created for user {owner_id} at tier {wallet.kyc_level.value}")

        if request.cin_number:
            wallet_id = wallet.id
            await self.kyc_service.initiate_basic_verification(wallet_id, request.cin_number)
            wallet = await self._load(wallet_id)
            offer = await self._linked_offer(wallet)

        return _to_response(wallet, offer)

    async def get_wallet_by_id(self, wallet_id: UUID, caller_id: UUID) -> WalletResponse:
        """Owner or admin read; stale usage counters are reset first"""
        try:
            wallet = await self._load(wallet_id, for_update=True)
            await authorize_wallet_access(self.session, wallet, caller_id, "view", allow_admin=True)
            await reset_usage_if_rolled_over(self.session, wallet)
            offer = await self._linked_offer(wallet)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return _to_response(wallet, offer)

    async def get_wallet_balance(self, wallet_id: UUID, caller_id: UUID) -> Decimal:
        """Balance display; stale usage counters are reset first"""
        try:
            wallet = await self._load(wallet_id, for_update=True)
            await authorize_wallet_access(self.session, wallet, caller_id, "view", allow_admin=True)
            await reset_usage_if_rolled_over(self.session, wallet)
            balance = wallet.balance
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return balance

    async def update_wallet(self, wallet_id: UUID, request: UpdateWalletRequest, caller_id: UUID) -> WalletResponse:
        """
        Partial update.

        Owners may change name, phone, offer, CIN and reactivate an inactive
        wallet. Blocking, deactivating, unblocking and tier changes need an
        admin. A tier change follows the KYC upgrade rules.
        """
        logger.info(f"Updating wallet {wallet_id}")
        cin_changed = False

        try:
            wallet = await self._load(wallet_id, for_update=True)
            await authorize_wallet_access(self.session, wallet, caller_id, "modify", allow_admin=True)
            caller_is_admin = await is_admin(self.session, caller_id)

            if request.owner_name:
                wallet.owner_name = request.owner_name

            if request.phone_number:
                if not is_valid_phone_number(request.phone_number):
                    raise ValidationError("Phone number must use the +2126XXXXXXXX format")
                wallet.phone_number = request.phone_number

            if request.offer_id is not None:
                await self._usable_offer(request.offer_id)
                wallet.offer_id = request.offer_id

            if request.status is not None and request.status != wallet.status:
                owner_reactivation = (
                    request.status == WalletStatus.ACTIVE and wallet.status == WalletStatus.INACTIVE
                )
                if not caller_is_admin and not owner_reactivation:
                    raise UnauthorizedError("Only an administrator can block, unblock or deactivate a wallet")
                wallet.status = request.status

            if request.kyc_level is not None and request.kyc_level != wallet.kyc_level:
                if not caller_is_admin:
                    raise UnauthorizedError("Only an administrator can change the KYC level")
                ok, error = check_kyc_upgrade(wallet, request.kyc_level)
                if not ok:
                    raise error
                apply_kyc_level(wallet, request.kyc_level)

            if request.cin_number and request.cin_number != wallet.cin_number:
                if not is_valid_cin(request.cin_number):
                    raise ValidationError("Invalid CIN format")
                wallet.cin_number = request.cin_number
                wallet.is_identity_verified = False
                cin_changed = True

            wallet.updated_at = utcnow()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if cin_changed:
            await self.kyc_service.initiate_basic_verification(wallet_id, request.cin_number)

        return await self.get_wallet_by_id(wallet_id, caller_id)

    async def delete_wallet(self, wallet_id: UUID, caller_id: UUID) -> bool:
        """Only empty wallets without recent activity can be deleted"""
        logger.info(f"Deleting wallet {wallet_id}")
        try:
            wallet = await self._load(wallet_id, for_update=True)
            await authorize_wallet_access(self.session, wallet, caller_id, "delete", allow_admin=True)

            if wallet.balance > 0:
                raise BusinessRuleError("Cannot delete a wallet with a positive balance; withdraw the balance first")
            if await wallet_repo.has_active_transactions(self.session, wallet_id):
                raise BusinessRuleError("Cannot delete a wallet with recent transactions")

            await wallet_repo.delete_wallet(self.session, wallet_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Wallet {wallet_id} deleted")
        return True

    async def get_wallets(self, request: GetWalletsRequest, caller_id: UUID) -> PagedResponse[WalletResponse]:
        """Filtered page of wallets; non-admins only see their own"""
        owner_filter = None if await is_admin(self.session, caller_id) else caller_id
        filters = dict(
            owner_id=owner_filter,
            owner_name=request.owner_name,
            offer_id=request.offer_id,
            min_balance=request.min_balance,
            max_balance=request.max_balance,
            status=request.status,
            kyc_level=request.kyc_level,
        )

        wallets = await wallet_repo.get_wallets(
            self.session, page_number=request.page_number, page_size=request.page_size, **filters
        )
        total_count = await wallet_repo.count_wallets(self.session, **filters)
        offers = await get_offers_by_ids(self.session, [w.offer_id for w in wallets if w.offer_id])

        items = [_to_response(w, offers.get(w.offer_id)) for w in wallets]
        return PagedResponse[WalletResponse].build(items, request.page_number, request.page_size, total_count)

    async def assign_offer(self, wallet_id: UUID, offer_id: UUID, caller_id: UUID) -> WalletResponse:
        logger.info(f"Assigning offer {offer_id} to wallet {wallet_id}")
        try:
            wallet = await self._load(wallet_id, for_update=True)
            await authorize_wallet_access(self.session, wallet, caller_id, "modify", allow_admin=True)
            offer = await self._usable_offer(offer_id)
            wallet.offer_id = offer.id
            wallet.updated_at = utcnow()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return _to_response(wallet, offer)

    async def can_perform_transaction(self, wallet_id: UUID, amount: Decimal, caller_id: UUID) -> bool:
        """
        Dry run of the debit checks for an amount.

        Raises the same errors a real debit would (BusinessRuleError,
        InsufficientBalanceError, OfferLimitExceededError).
        """
        try:
            wallet = await self._load(wallet_id, for_update=True)
            await authorize_wallet_access(self.session, wallet, caller_id, "operate", allow_admin=True)
            await reset_usage_if_rolled_over(self.session, wallet)
            offer = await self._linked_offer(wallet)
            ok, error = check_can_transact(wallet, amount, offer)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if not ok:
            raise error
        return True
