"""
Integration tests for offer administration
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from paywallet.core.clock import utcnow
from paywallet.core.errors import BusinessRuleError, UnauthorizedError, ValidationError
from paywallet.models.enums import OfferType, UserRole
from paywallet.schemas.requests import CreateOfferRequest
from paywallet.services.offer_service import OfferService
from tests.fixtures.database import create_test_offer, create_test_user, create_test_wallet


def offer_request(**overrides):
    now = utcnow()
    values = dict(
        name="Ramadan cashback",
        description="2% back on every payment",
        type=OfferType.CASHBACK,
        spending_limit=Decimal("3000"),
        valid_from=now,
        valid_to=now + timedelta(days=30),
        cashback_percentage=Decimal("2"),
    )
    values.update(overrides)
    return CreateOfferRequest(**values)


@pytest.fixture
def offer_service(async_session):
    return OfferService(async_session)


class TestOfferCreation:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_admin_creates_active_offer(self, async_session, offer_service):
        admin = await create_test_user(async_session, role=UserRole.ADMIN)

        offer = await offer_service.create_offer(offer_request(), admin.id)

        assert offer.is_active is True
        assert offer.type == OfferType.CASHBACK
        assert offer.cashback_percentage == Decimal("2")
        assert (await offer_service.get_offer(offer.id)).name == "Ramadan cashback"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_regular_user_cannot_create(self, async_session, offer_service):
        user = await create_test_user(async_session)

        with pytest.raises(UnauthorizedError):
            await offer_service.create_offer(offer_request(), user.id)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_invalid_definitions(self, async_session, offer_service):
        admin = await create_test_user(async_session, role=UserRole.ADMIN)
        admin_id = admin.id
        now = utcnow()

        with pytest.raises(ValidationError):
            await offer_service.create_offer(offer_request(valid_from=now, valid_to=now - timedelta(days=1)), admin_id)

        with pytest.raises(ValidationError):
            await offer_service.create_offer(offer_request(cashback_percentage=Decimal("150")), admin_id)

        with pytest.raises(ValidationError):
            await offer_service.create_offer(offer_request(type=OfferType.REDUCED_FEES), admin_id)

        with pytest.raises(ValidationError):
            await offer_service.create_offer(offer_request(spending_limit=Decimal("0")), admin_id)

        # only the percentage matching the offer type may be set
        with pytest.raises(ValidationError):
            await offer_service.create_offer(offer_request(fees_discount=Decimal("-50")), admin_id)

        with pytest.raises(ValidationError):
            await offer_service.create_offer(offer_request(recharge_bonus=Decimal("10")), admin_id)

        assert (await offer_service.get_offers()).total_count == 0


class TestOfferLifecycle:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_update_revalidates(self, async_session, offer_service):
        admin = await create_test_user(async_session, role=UserRole.ADMIN)
        offer = await offer_service.create_offer(offer_request(), admin.id)
        admin_id, offer_id = admin.id, offer.id

        updated = await offer_service.update_offer(
            offer_id, offer_request(name="Summer cashback", cashback_percentage=Decimal("3.5")), admin_id
        )
        assert updated.name == "Summer cashback"
        assert updated.cashback_percentage == Decimal("3.5")

        with pytest.raises(ValidationError):
            await offer_service.update_offer(offer_id, offer_request(description=" "), admin_id)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_offer_in_use_cannot_be_deleted(self, async_session, offer_service):
        admin = await create_test_user(async_session, role=UserRole.ADMIN)
        owner = await create_test_user(async_session)
        used = await create_test_offer(async_session, fees_discount=Decimal("10"))
        unused = await create_test_offer(async_session, fees_discount=Decimal("10"))
        await create_test_wallet(async_session, owner, offer=used)
        admin_id, used_id, unused_id = admin.id, used.id, unused.id

        with pytest.raises(BusinessRuleError):
            await offer_service.delete_offer(used_id, admin_id)

        assert await offer_service.delete_offer(unused_id, admin_id) is True

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_activation(self, async_session, offer_service):
        admin = await create_test_user(async_session, role=UserRole.ADMIN)
        expired = await create_test_offer(
            async_session, fees_discount=Decimal("10"), valid_to=utcnow() - timedelta(days=1), is_active=False
        )
        dormant = await create_test_offer(async_session, fees_discount=Decimal("10"), is_active=False)
        admin_id, expired_id, dormant_id = admin.id, expired.id, dormant.id

        with pytest.raises(BusinessRuleError):
            await offer_service.activate_offer(expired_id, admin_id)

        assert (await offer_service.activate_offer(dormant_id, admin_id)).is_active is True
        # activating twice is a no-op
        assert (await offer_service.activate_offer(dormant_id, admin_id)).is_active is True

        assert (await offer_service.deactivate_offer(dormant_id, admin_id)).is_active is False
        assert (await offer_service.deactivate_offer(dormant_id, admin_id)).is_active is False

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_listing(self, async_session, offer_service):
        await create_test_offer(async_session, fees_discount=Decimal("10"))
        await create_test_offer(async_session, fees_discount=Decimal("10"), is_active=False)
        await create_test_offer(async_session, offer_type=OfferType.RECHARGE_BONUS, recharge_bonus=Decimal("5"))

        everything = await offer_service.get_offers()
        active = await offer_service.get_offers(active_only=True)
        bonuses = await offer_service.get_offers(offer_type=OfferType.RECHARGE_BONUS)

        assert everything.total_count == 3
        assert active.total_count == 2
        assert bonuses.total_count == 1

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_wallets_by_offer_is_admin_only(self, async_session, offer_service):
        admin = await create_test_user(async_session, role=UserRole.ADMIN)
        owner = await create_test_user(async_session)
        offer = await create_test_offer(async_session, fees_discount=Decimal("10"))
        await create_test_wallet(async_session, owner, offer=offer)
        await create_test_wallet(async_session, owner)
        admin_id, owner_id, offer_id = admin.id, owner.id, offer.id

        page = await offer_service.get_wallets_by_offer(offer_id, caller_id=admin_id)
        assert page.total_count == 1
        assert page.items[0].offer.id == offer_id

        with pytest.raises(UnauthorizedError):
            await offer_service.get_wallets_by_offer(offer_id, caller_id=owner_id)
