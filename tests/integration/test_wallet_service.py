"""
Integration tests for the wallet lifecycle
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from paywallet.core.clock import utcnow
from paywallet.core.errors import (
    BusinessRuleError,
    InsufficientBalanceError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from paywallet.models.enums import KycLevel, UserRole, WalletStatus
from paywallet.repos.wallet_repo import get_wallet_by_id
from paywallet.schemas.requests import CreateWalletRequest, GetWalletsRequest, UpdateWalletRequest
from paywallet.services.wallet_service import WalletService
from tests.fixtures.database import (
    add_past_transaction,
    create_test_offer,
    create_test_user,
    create_test_wallet,
    reload_wallet,
)


@pytest.fixture
def wallet_service(async_session, kyc_service):
    return WalletService(async_session, kyc_service=kyc_service)


def new_wallet(**overrides):
    values = dict(owner_name="Amina Alaoui", phone_number="+212612345678")
    values.update(overrides)
    return CreateWalletRequest(**values)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_wallet_without_cin(async_session, wallet_service):
    owner = await create_test_user(async_session)

    wallet = await wallet_service.create_wallet(new_wallet(initial_balance=Decimal("50")), owner.id)

    assert wallet.owner_id == owner.id
    assert wallet.kyc_level == KycLevel.NONE
    assert wallet.daily_limit == Decimal("1000")
    assert wallet.monthly_limit == Decimal("5000")
    assert wallet.balance == Decimal("50")
    assert wallet.status == WalletStatus.ACTIVE


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_wallet_with_cin_starts_at_basic(async_session, wallet_service, notifier):
    owner = await create_test_user(async_session)

    wallet = await wallet_service.create_wallet(new_wallet(cin_number="BE654321"), owner.id)

    assert wallet.kyc_level == KycLevel.BASIC
    assert wallet.daily_limit == Decimal("5000")
    stored = await get_wallet_by_id(async_session, wallet.id)
    assert stored.cin_number == "BE654321"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_wallet_with_malformed_cin_stays_unverified(async_session, wallet_service):
    owner = await create_test_user(async_session)

    wallet = await wallet_service.create_wallet(new_wallet(cin_number="nope"), owner.id)

    assert wallet.kyc_level == KycLevel.NONE
    stored = await get_wallet_by_id(async_session, wallet.id)
    assert stored.cin_number is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_wallet_validation(async_session, wallet_service):
    owner = await create_test_user(async_session)
    expired = await create_test_offer(async_session, valid_to=utcnow() - timedelta(days=1))
    owner_id, expired_id = owner.id, expired.id

    with pytest.raises(ValidationError):
        await wallet_service.create_wallet(new_wallet(phone_number="0612345678"), owner_id)

    with pytest.raises(ValidationError):
        await wallet_service.create_wallet(new_wallet(initial_balance=Decimal("-1")), owner_id)

    with pytest.raises(BusinessRuleError):
        await wallet_service.create_wallet(new_wallet(offer_id=expired_id), owner_id)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_wallet_with_offer(async_session, wallet_service):
    owner = await create_test_user(async_session)
    offer = await create_test_offer(async_session, fees_discount=Decimal("25"))

    wallet = await wallet_service.create_wallet(new_wallet(offer_id=offer.id), owner.id)

    assert wallet.offer is not None
    assert wallet.offer.id == offer.id


@pytest.mark.integration
@pytest.mark.asyncio
async def test_read_access(async_session, wallet_service):
    owner = await create_test_user(async_session)
    stranger = await create_test_user(async_session)
    admin = await create_test_user(async_session, role=UserRole.ADMIN)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("75"))
    wallet_id, stranger_id, admin_id, owner_id = wallet.id, stranger.id, admin.id, owner.id

    assert (await wallet_service.get_wallet_by_id(wallet_id, owner_id)).balance == Decimal("75")
    assert (await wallet_service.get_wallet_by_id(wallet_id, admin_id)).id == wallet_id
    assert await wallet_service.get_wallet_balance(wallet_id, owner_id) == Decimal("75")

    with pytest.raises(UnauthorizedError):
        await wallet_service.get_wallet_by_id(wallet_id, stranger_id)

    with pytest.raises(NotFoundError):
        await wallet_service.get_wallet_by_id(uuid4(), owner_id)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_reading_a_wallet_resets_stale_usage(async_session, wallet_service):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("75"), daily_usage=Decimal("300"))
    await add_past_transaction(async_session, wallet.id, created_at=utcnow() - timedelta(days=1))

    response = await wallet_service.get_wallet_by_id(wallet.id, owner.id)

    assert response.current_daily_usage == Decimal("0")
    assert (await reload_wallet(async_session, wallet.id)).current_daily_usage == Decimal("0")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_repeated_reads_are_identical(async_session, wallet_service):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(
        async_session, owner, balance=Decimal("640.25"), daily_usage=Decimal("120"), monthly_usage=Decimal("900")
    )
    await add_past_transaction(async_session, wallet.id, created_at=utcnow())
    wallet_id, owner_id = wallet.id, owner.id

    first = await wallet_service.get_wallet_by_id(wallet_id, owner_id)
    second = await wallet_service.get_wallet_by_id(wallet_id, owner_id)

    assert first == second
    assert second.balance == Decimal("640.25")
    assert second.current_daily_usage == Decimal("120")
    assert second.current_monthly_usage == Decimal("900")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_balance_read_resets_stale_usage(async_session, wallet_service):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("75"), daily_usage=Decimal("300"))
    await add_past_transaction(async_session, wallet.id, created_at=utcnow() - timedelta(days=1))
    wallet_id, owner_id = wallet.id, owner.id

    assert await wallet_service.get_wallet_balance(wallet_id, owner_id) == Decimal("75")
    assert (await reload_wallet(async_session, wallet_id)).current_daily_usage == Decimal("0")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_initial_balance_must_be_whole_cents(async_session, wallet_service):
    owner = await create_test_user(async_session)

    with pytest.raises(ValidationError):
        await wallet_service.create_wallet(new_wallet(initial_balance=Decimal("10.005")), owner.id)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_status_changes(async_session, wallet_service):
    owner = await create_test_user(async_session)
    admin = await create_test_user(async_session, role=UserRole.ADMIN)
    wallet = await create_test_wallet(async_session, owner, status=WalletStatus.INACTIVE)
    wallet_id, owner_id, admin_id = wallet.id, owner.id, admin.id

    reactivated = await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(status=WalletStatus.ACTIVE), owner_id)
    assert reactivated.status == WalletStatus.ACTIVE

    with pytest.raises(UnauthorizedError):
        await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(status=WalletStatus.BLOCKED), owner_id)

    blocked = await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(status=WalletStatus.BLOCKED), admin_id)
    assert blocked.status == WalletStatus.BLOCKED

    with pytest.raises(UnauthorizedError):
        await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(status=WalletStatus.ACTIVE), owner_id)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_tier_changes_need_admin_and_go_up(async_session, wallet_service):
    owner = await create_test_user(async_session)
    admin = await create_test_user(async_session, role=UserRole.ADMIN)
    wallet = await create_test_wallet(async_session, owner, kyc_level=KycLevel.BASIC)
    wallet_id, owner_id, admin_id = wallet.id, owner.id, admin.id

    with pytest.raises(UnauthorizedError):
        await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(kyc_level=KycLevel.STANDARD), owner_id)

    with pytest.raises(BusinessRuleError):
        await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(kyc_level=KycLevel.NONE), admin_id)

    upgraded = await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(kyc_level=KycLevel.STANDARD), admin_id)
    assert upgraded.kyc_level == KycLevel.STANDARD
    assert upgraded.daily_limit == Decimal("10000")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_changing_cin_resets_identity_verification(async_session, wallet_service):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, kyc_level=KycLevel.STANDARD, is_identity_verified=True)
    wallet_id, owner_id = wallet.id, owner.id

    with pytest.raises(ValidationError):
        await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(cin_number="bad"), owner_id)

    await wallet_service.update_wallet(wallet_id, UpdateWalletRequest(cin_number="K123456"), owner_id)

    refreshed = await reload_wallet(async_session, wallet_id)
    assert refreshed.cin_number == "K123456"
    assert refreshed.is_identity_verified is False
    assert refreshed.kyc_level == KycLevel.STANDARD


@pytest.mark.integration
@pytest.mark.asyncio
async def test_delete_rules(async_session, wallet_service):
    owner = await create_test_user(async_session)
    funded = await create_test_wallet(async_session, owner, balance=Decimal("10"))
    active = await create_test_wallet(async_session, owner)
    dormant = await create_test_wallet(async_session, owner)
    funded_id, active_id, dormant_id, owner_id = funded.id, active.id, dormant.id, owner.id
    await add_past_transaction(async_session, active_id, created_at=utcnow() - timedelta(days=3))
    await add_past_transaction(async_session, dormant_id, created_at=utcnow() - timedelta(days=90))

    with pytest.raises(BusinessRuleError):
        await wallet_service.delete_wallet(funded_id, owner_id)

    with pytest.raises(BusinessRuleError):
        await wallet_service.delete_wallet(active_id, owner_id)

    assert await wallet_service.delete_wallet(dormant_id, owner_id) is True
    assert await get_wallet_by_id(async_session, dormant_id) is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_listing_is_scoped_to_the_caller(async_session, wallet_service):
    alice = await create_test_user(async_session)
    bob = await create_test_user(async_session)
    admin = await create_test_user(async_session, role=UserRole.ADMIN)
    await create_test_wallet(async_session, alice, balance=Decimal("10"))
    await create_test_wallet(async_session, alice, balance=Decimal("500"))
    await create_test_wallet(async_session, bob, balance=Decimal("900"))

    own = await wallet_service.get_wallets(GetWalletsRequest(), alice.id)
    assert own.total_count == 2
    assert {w.owner_id for w in own.items} == {alice.id}

    everyone = await wallet_service.get_wallets(GetWalletsRequest(min_balance=Decimal("100")), admin.id)
    assert everyone.total_count == 2

    paged = await wallet_service.get_wallets(GetWalletsRequest(page_size=1, page_number=2), admin.id)
    assert paged.total_count == 3
    assert paged.total_pages == 3
    assert len(paged.items) == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_assign_offer_and_dry_run(async_session, wallet_service):
    owner = await create_test_user(async_session)
    offer = await create_test_offer(async_session, spending_limit=Decimal("100"), fees_discount=Decimal("10"))
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("50"))
    wallet_id, owner_id, offer_id = wallet.id, owner.id, offer.id

    assigned = await wallet_service.assign_offer(wallet_id, offer_id, owner_id)
    assert assigned.offer.id == offer_id

    assert await wallet_service.can_perform_transaction(wallet_id, Decimal("40"), owner_id) is True
    with pytest.raises(InsufficientBalanceError):
        await wallet_service.can_perform_transaction(wallet_id, Decimal("60"), owner_id)
