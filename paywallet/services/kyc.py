"""
KYC verification workflow.

Verification raises a wallet's tier, and the tier decides the wallet's
limits. Tiers only ever go up.
"""

import logging
import re
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.core.clock import add_years, as_naive_utc, utcnow
from paywallet.core.errors import NotFoundError
from paywallet.models.enums import KycLevel
from paywallet.models.wallet import Wallet
from paywallet.repos.user_repo import get_user_by_id
from paywallet.repos.wallet_repo import get_wallet_by_id, get_wallet_for_update
from paywallet.schemas.requests import VerifyIdentityRequest
from paywallet.schemas.responses import KycVerificationStatus
from paywallet.services.access import authorize_wallet_access, require_admin
from paywallet.services.identity import IdentityProvider, get_identity_provider
from paywallet.services.limits import apply_kyc_level, check_kyc_upgrade
from paywallet.services.notification import Notifier, get_notifier, notify_user

logger = logging.getLogger(__name__)

# One or two letters followed by five or six digits
CIN_PATTERN = re.compile(r"^[A-Za-z]{1,2}\d{5,6}$")

MINIMUM_AGE = 18
VERIFICATION_VALIDITY_YEARS = 1

STATUS_MESSAGES = {
    KycLevel.NONE: "No identity verification has been performed.",
    KycLevel.BASIC: "Basic verification done. Complete identity verification to raise your limits.",
    KycLevel.STANDARD: "Standard verification done. Your identity has been verified.",
    KycLevel.ADVANCED: "Advanced verification done. You have the highest transaction limits.",
}


def is_valid_cin(cin_number: Optional[str]) -> bool:
    return bool(cin_number) and CIN_PATTERN.match(cin_number) is not None


def is_adult(date_of_birth: date, today: date) -> bool:
    """True once the 18th birthday has been reached"""
    return add_years(date_of_birth, MINIMUM_AGE) <= today


class KycService:
    """KYC tier changes for one database session"""

    def __init__(
        self,
        session: AsyncSession,
        notifier: Notifier = None,
        identity_provider: IdentityProvider = None
    ):
        self.session = session
        self.notifier = notifier or get_notifier()
        self.identity_provider = identity_provider or get_identity_provider()

    async def _load_wallet(self, wallet_id: UUID, for_update: bool = True) -> Wallet:
        if for_update:
            wallet = await get_wallet_for_update(self.session, wallet_id)
        else:
            wallet = await get_wallet_by_id(self.session, wallet_id)
        if wallet is None:
            logger.error(f"Wallet {wallet_id} not found for KYC operation")
            raise NotFoundError(f"Wallet {wallet_id} does not exist")
        return wallet

    async def _mirror_on_user(self, wallet: Wallet) -> None:
        """Copy the wallet's tier onto the owning user record, if there is one"""
        user = await get_user_by_id(self.session, wallet.owner_id)
        if user is not None and user.kyc_level.rank < wallet.kyc_level.rank:
            user.kyc_level = wallet.kyc_level

    async def initiate_basic_verification(
        self,
        wallet_id: UUID,
        cin_number: str,
        caller_id: Optional[UUID] = None
    ) -> bool:
        """
        Record a CIN and grant the basic tier.

        A malformed CIN is not an error: KYC is optional, so the call just
        answers False and changes nothing.

        Args:
            wallet_id: Wallet UUID
            cin_number: National ID number
            caller_id: Authenticated user (None for internal calls)

        Returns:
            True when the CIN was accepted
        """
        logger.info(f"Initiating basic KYC verification for wallet {wallet_id}")
        try:
            wallet = await self._load_wallet(wallet_id)
            await authorize_wallet_access(self.session, wallet, caller_id, "verify")

            if not is_valid_cin(cin_number):
                logger.warning(f"Invalid CIN format for wallet {wallet_id}")
                await self.session.rollback()
                return False

            wallet.cin_number = cin_number
            if wallet.kyc_level.rank < KycLevel.BASIC.rank:
                apply_kyc_level(wallet, KycLevel.BASIC)
            wallet.updated_at = utcnow()
            await self._mirror_on_user(wallet)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await notify_user(
            self.notifier,
            wallet.owner_id,
            "Your basic identity verification succeeded. Higher transaction limits now apply."
        )
        logger.info(f"Basic KYC verification completed for wallet {wallet_id}")
        return True

    async def verify_identity(
        self,
        wallet_id: UUID,
        request: VerifyIdentityRequest,
        caller_id: Optional[UUID] = None,
        now: Optional[datetime] = None
    ) -> bool:
        """
        Full identity verification: CIN, name, ID card images and selfie,
        adult owner, then the identity provider's document check.

        On success the wallet is marked verified and moves to the standard
        tier (never down). Provider errors propagate.

        Returns:
            True when verified, False when the request does not qualify
        """
        logger.info(f"Processing full identity verification for wallet {wallet_id}")
        now = as_naive_utc(now) if now else utcnow()

        try:
            wallet = await self._load_wallet(wallet_id)
            await authorize_wallet_access(self.session, wallet, caller_id, "verify")

            complete = all([
                is_valid_cin(request.cin_number),
                request.full_name and request.full_name.strip(),
                request.cin_front_image,
                request.cin_back_image,
                request.selfie_image,
            ])
            if not complete or not is_adult(request.date_of_birth, now.date()):
                logger.warning(f"Identity verification rejected for wallet {wallet_id}: incomplete or underage")
                await self.session.rollback()
                return False

            if not await self.identity_provider.verify_documents(request):
                logger.warning(f"Identity provider rejected documents for wallet {wallet_id}")
                await self.session.rollback()
                return False

            wallet.cin_number = request.cin_number
            wallet.is_identity_verified = True
            wallet.verification_date = now
            target = KycLevel.STANDARD if wallet.kyc_level.rank < KycLevel.STANDARD.rank else wallet.kyc_level
            apply_kyc_level(wallet, target)
            wallet.updated_at = now
            await self._mirror_on_user(wallet)
            await self.session.commit()
        except Exception:
            logger.error(f"Error during identity verification for wallet {wallet_id}")
            await self.session.rollback()
            raise

        await notify_user(
            self.notifier,
            wallet.owner_id,
            "Your identity has been verified. Higher transaction limits now apply."
        )
        logger.info(f"Identity verification successful for wallet {wallet_id}")
        return True

    async def upgrade_kyc_level(
        self,
        wallet_id: UUID,
        new_level: KycLevel,
        caller_id: Optional[UUID] = None
    ) -> bool:
        """
        Move a wallet to a higher tier and re-derive its limits.

        Raises:
            NotFoundError: wallet missing
            UnauthorizedError: caller is not an admin
            BusinessRuleError: not an upgrade, or ADVANCED without verified identity
        """
        logger.info(f"Upgrading KYC level for wallet {wallet_id} to {new_level.value}")
        try:
            await require_admin(self.session, caller_id, "change KYC levels")
            wallet = await self._load_wallet(wallet_id)

            ok, error = check_kyc_upgrade(wallet, new_level)
            if not ok:
                logger.warning(f"KYC change rejected for wallet {wallet_id}: {error.message}")
                raise error

            apply_kyc_level(wallet, new_level)
            wallet.updated_at = utcnow()
            await self._mirror_on_user(wallet)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await notify_user(
            self.notifier,
            wallet.owner_id,
            f"Your verification level is now {new_level.value}. Higher transaction limits now apply."
        )
        logger.info(f"KYC level upgraded to {new_level.value} for wallet {wallet_id}")
        return True

    async def check_verification_status(
        self,
        wallet_id: UUID,
        caller_id: Optional[UUID] = None
    ) -> KycVerificationStatus:
        """Current tier, verified flag and the verification's expiry (one year)"""
        wallet = await self._load_wallet(wallet_id, for_update=False)
        await authorize_wallet_access(self.session, wallet, caller_id, "view", allow_admin=True)

        expiry = None
        if wallet.verification_date is not None:
            expiry = add_years(wallet.verification_date, VERIFICATION_VALIDITY_YEARS)

        return KycVerificationStatus(
            is_verified=bool(wallet.is_identity_verified),
            current_level=wallet.kyc_level,
            message=STATUS_MESSAGES[wallet.kyc_level],
            verification_date=wallet.verification_date,
            expiry_date=expiry
        )
