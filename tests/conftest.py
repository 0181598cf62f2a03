"""
Test configuration and fixtures for PayWallet

Every test gets its own in-memory SQLite database; external collaborators
(payment gateway, biller, fraud screening, notifications, one-time codes,
identity provider) are replaced by recording fakes.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "testing")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import paywallet.models  # noqa: F401  registers the tables on Base.metadata
from paywallet.db.base import Base
from paywallet.services import bill_payment, fraud, identity, notification, otp, payment_gateway
from paywallet.services.kyc import KycService
from paywallet.services.transaction_engine import TransactionEngine
from tests.fixtures.fakes import (
    FakeBillProvider,
    FakeFraudDetector,
    FakeIdentityProvider,
    FakeOtpVerifier,
    FakePaymentGateway,
    RecordingNotifier,
)


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(db_engine):
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def bill_provider():
    return FakeBillProvider()


@pytest.fixture
def fraud_detector():
    return FakeFraudDetector()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def otp_verifier():
    return FakeOtpVerifier()


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def engine(async_session, gateway, bill_provider, fraud_detector, notifier, otp_verifier):
    return TransactionEngine(
        async_session,
        payment_gateway=gateway,
        bill_provider=bill_provider,
        fraud_detector=fraud_detector,
        notifier=notifier,
        otp_verifier=otp_verifier,
        settlement_timeout=5
    )


@pytest.fixture
def kyc_service(async_session, notifier, identity_provider):
    return KycService(async_session, notifier=notifier, identity_provider=identity_provider)


@pytest.fixture
def installed_fakes(gateway, bill_provider, fraud_detector, notifier, otp_verifier, identity_provider):
    """Install the fakes as the process-wide providers used by the API layer."""
    payment_gateway.set_payment_gateway(gateway)
    bill_payment.set_bill_payment_provider(bill_provider)
    fraud.set_fraud_detector(fraud_detector)
    notification.set_notifier(notifier)
    otp.set_otp_verifier(otp_verifier)
    identity.set_identity_provider(identity_provider)
    yield
    payment_gateway.set_payment_gateway(None)
    bill_payment.set_bill_payment_provider(None)
    fraud.set_fraud_detector(None)
    notification.set_notifier(None)
    otp.set_otp_verifier(None)
    identity.set_identity_provider(None)
