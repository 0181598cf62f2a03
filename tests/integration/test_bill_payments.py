"""
Integration tests for bill payments
"""

from decimal import Decimal

import pytest

from paywallet.core.errors import BusinessRuleError, ValidationError
from paywallet.models.enums import TransactionType
from paywallet.schemas.requests import PayBillRequest
from paywallet.services.transaction_engine import BILL_SETTLEMENT_FAILED_REASON
from tests.fixtures.database import (
    all_bills,
    assert_wallet_balance,
    create_test_user,
    create_test_wallet,
    reload_wallet,
    transactions_of,
)


def telecom_bill(amount="200", bill_type="telecom"):
    return PayBillRequest(
        biller_name="Maroc Telecom",
        biller_reference="MT-2024-0042",
        customer_reference="0522000000",
        amount=Decimal(amount),
        bill_type=bill_type
    )


@pytest.mark.integration
@pytest.mark.asyncio
async def test_bill_payment_marks_bill_paid(async_session, engine, bill_provider):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("1000"))

    result = await engine.pay_bill(wallet.id, telecom_bill(), owner.id)

    assert result.is_successful is True
    assert result.type == TransactionType.BILL_PAYMENT
    assert result.fee == Decimal("2.00")
    assert result.reference_number == "BILL-REF-1"
    assert result.bill is not None
    assert result.bill.is_paid is True
    assert result.bill.payment_date is not None
    assert bill_provider.paid == [("Maroc Telecom", "MT-2024-0042", Decimal("200"), "telecom")]

    refreshed = await reload_wallet(async_session, wallet.id)
    assert_wallet_balance(refreshed, Decimal("798.00"))
    assert refreshed.current_daily_usage == Decimal("202.00")
    rows = await transactions_of(async_session, wallet.id)
    assert sorted(r.type.value for r in rows) == ["bill_payment", "fee"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unrecognised_bill_writes_nothing(async_session, engine, bill_provider):
    bill_provider.valid = False
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("1000"))
    wallet_id, owner_id = wallet.id, owner.id

    with pytest.raises(BusinessRuleError) as exc_info:
        await engine.pay_bill(wallet_id, telecom_bill(), owner_id)

    assert "verification failed" in exc_info.value.message
    assert bill_provider.paid == []
    assert await all_bills(async_session) == []
    assert await transactions_of(async_session, wallet_id) == []
    assert_wallet_balance(await reload_wallet(async_session, wallet_id), Decimal("1000"))


@pytest.mark.integration
@pytest.mark.asyncio
async def test_failed_bill_settlement_keeps_unpaid_bill(async_session, engine, bill_provider):
    bill_provider.error = ValueError("Unsupported bill type: parking")
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("1000"))

    result = await engine.pay_bill(wallet.id, telecom_bill(bill_type="parking"), owner.id)

    assert result.is_successful is False
    assert result.failure_reason == BILL_SETTLEMENT_FAILED_REASON
    assert result.bill.is_paid is False
    bills = await all_bills(async_session)
    assert len(bills) == 1 and bills[0].is_paid is False
    assert_wallet_balance(await reload_wallet(async_session, wallet.id), Decimal("1000"))
    rows = await transactions_of(async_session, wallet.id)
    assert [r.type for r in rows] == [TransactionType.BILL_PAYMENT]
    assert rows[0].bill_id == bills[0].id


@pytest.mark.integration
@pytest.mark.asyncio
async def test_bill_details_are_required(async_session, engine, bill_provider):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("1000"))
    request = telecom_bill()
    request.customer_reference = "  "

    with pytest.raises(ValidationError):
        await engine.pay_bill(wallet.id, request, owner.id)
    assert bill_provider.verified == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_bill_history_carries_the_bill(async_session, engine):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("1000"))
    await engine.pay_bill(wallet.id, telecom_bill(amount="100", bill_type="eau"), owner.id)

    page = await engine.get_wallet_transactions(wallet.id, owner.id, tx_type=TransactionType.BILL_PAYMENT)

    assert page.total_count == 1
    assert page.items[0].bill.biller_name == "Maroc Telecom"
    assert page.items[0].fee == Decimal("0.50")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_sub_cent_bill_amount_is_refused(async_session, engine, bill_provider):
    owner = await create_test_user(async_session)
    wallet = await create_test_wallet(async_session, owner, balance=Decimal("1000"))

    with pytest.raises(ValidationError):
        await engine.pay_bill(wallet.id, telecom_bill(amount="200.001"), owner.id)

    assert bill_provider.verified == []
    assert await all_bills(async_session) == []
