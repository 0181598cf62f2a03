"""
Integration tests for the KYC workflow
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from paywallet.core.clock import utcnow
from paywallet.core.errors import BusinessRuleError, UnauthorizedError
from paywallet.models.enums import KycLevel, UserRole
from paywallet.models.user import User
from paywallet.schemas.requests import VerifyIdentityRequest
from tests.fixtures.database import create_test_user, create_test_wallet, reload_wallet


def identity_request(date_of_birth=date(1990, 5, 17), selfie="c2VsZmll"):
    return VerifyIdentityRequest(
        cin_number="AB123456",
        full_name="Amina Alaoui",
        date_of_birth=date_of_birth,
        cin_front_image="ZnJvbnQ=",
        cin_back_image="YmFjaw==",
        selfie_image=selfie
    )


@pytest.mark.integration
@pytest.mark.asyncio
async def test_basic_verification_raises_tier_and_limits(async_session, kyc_service, notifier):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner)

    assert await kyc_service.initiate_basic_verification(wallet.id, "AB123456", owner.id) is True

    refreshed = await reload_wallet(async_session, wallet.id)
    assert refreshed.kyc_level == KycLevel.BASIC
    assert refreshed.cin_number == "AB123456"
    assert refreshed.daily_limit == Decimal("5000")
    assert refreshed.monthly_limit == Decimal("20000")
    assert len(notifier.user_messages) == 1

    user = (await async_session.execute(
        select(User).where(User.id == owner.id).execution_options(populate_existing=True)
    )).scalar_one()
    assert user.kyc_level == KycLevel.BASIC


@pytest.mark.integration
@pytest.mark.asyncio
async def test_malformed_cin_is_not_an_error(async_session, kyc_service, notifier):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner)
    wallet_id, owner_id = wallet.id, owner.id

    assert await kyc_service.initiate_basic_verification(wallet_id, "12-34", owner_id) is False

    refreshed = await reload_wallet(async_session, wallet_id)
    assert refreshed.kyc_level == KycLevel.NONE
    assert refreshed.cin_number is None
    assert notifier.user_messages == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_basic_verification_never_lowers_tier(async_session, kyc_service):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, kyc_level=KycLevel.STANDARD)

    assert await kyc_service.initiate_basic_verification(wallet.id, "X98765", owner.id) is True
    assert (await reload_wallet(async_session, wallet.id)).kyc_level == KycLevel.STANDARD


@pytest.mark.integration
@pytest.mark.asyncio
async def test_identity_verification(async_session, kyc_service, identity_provider):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, kyc_level=KycLevel.BASIC)

    assert await kyc_service.verify_identity(wallet.id, identity_request(), owner.id) is True

    refreshed = await reload_wallet(async_session, wallet.id)
    assert refreshed.is_identity_verified is True
    assert refreshed.kyc_level == KycLevel.STANDARD
    assert refreshed.daily_limit == Decimal("10000")
    assert refreshed.verification_date is not None
    assert len(identity_provider.requests) == 1

    status = await kyc_service.check_verification_status(wallet.id, owner.id)
    assert status.is_verified is True
    assert status.current_level == KycLevel.STANDARD
    assert status.expiry_date.year == status.verification_date.year + 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_identity_verification_rejections(async_session, kyc_service, identity_provider):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner)
    wallet_id, owner_id = wallet.id, owner.id
    seventeen = utcnow().date() - timedelta(days=17 * 365)

    assert await kyc_service.verify_identity(wallet_id, identity_request(selfie=None), owner_id) is False
    assert await kyc_service.verify_identity(wallet_id, identity_request(date_of_birth=seventeen), owner_id) is False
    assert identity_provider.requests == []

    identity_provider.verified = False
    assert await kyc_service.verify_identity(wallet_id, identity_request(), owner_id) is False

    refreshed = await reload_wallet(async_session, wallet_id)
    assert refreshed.is_identity_verified is False
    assert refreshed.kyc_level == KycLevel.NONE


@pytest.mark.integration
@pytest.mark.asyncio
async def test_identity_provider_errors_propagate(async_session, kyc_service, identity_provider):
    identity_provider.error = ConnectionError("kyc api down")
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner)

    with pytest.raises(ConnectionError):
        await kyc_service.verify_identity(wallet.id, identity_request(), owner.id)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_admin_upgrade_rules(async_session, kyc_service):
    admin = await create_test_user(async_session, role=UserRole.ADMIN)
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, kyc_level=KycLevel.STANDARD)
    admin_id, owner_id, wallet_id = admin.id, owner.id, wallet.id

    with pytest.raises(UnauthorizedError):
        await kyc_service.upgrade_kyc_level(wallet_id, KycLevel.ADVANCED, owner_id)

    with pytest.raises(BusinessRuleError):
        await kyc_service.upgrade_kyc_level(wallet_id, KycLevel.BASIC, admin_id)

    with pytest.raises(BusinessRuleError):
        await kyc_service.upgrade_kyc_level(wallet_id, KycLevel.ADVANCED, admin_id)

    refreshed = await reload_wallet(async_session, wallet_id)
    assert refreshed.kyc_level == KycLevel.STANDARD
    assert refreshed.daily_limit == Decimal("10000")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_admin_upgrade_to_advanced_after_verification(async_session, kyc_service):
    admin = await create_test_user(async_session, role=UserRole.ADMIN)
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, kyc_level=KycLevel.STANDARD, is_identity_verified=True)

    assert await kyc_service.upgrade_kyc_level(wallet.id, KycLevel.ADVANCED, admin.id) is True

    refreshed = await reload_wallet(async_session, wallet.id)
    assert refreshed.kyc_level == KycLevel.ADVANCED
    assert refreshed.daily_limit == Decimal("20000")
    assert refreshed.monthly_limit == Decimal("100000")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_status_without_verification(async_session, kyc_service):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner)

    status = await kyc_service.check_verification_status(wallet.id, owner.id)

    assert status.is_verified is False
    assert status.current_level == KycLevel.NONE
    assert status.expiry_date is None
