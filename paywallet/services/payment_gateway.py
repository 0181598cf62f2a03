"""
Payment gateway provider for card, mobile money and bank settlement
"""

import logging
import uuid
from decimal import Decimal
from typing import Optional

# Configure logging
logger = logging.getLogger(__name__)


class PaymentGateway:
    """
    Base payment gateway interface.

    Every method returns the provider's reference for the settled operation.
    An empty reference or a raised exception means the settlement failed.
    """

    async def process_card_payment(
        self,
        card_number: str,
        card_holder_name: str,
        expiry_date: str,
        cvv: str,
        amount: Decimal,
        currency: str
    ) -> Optional[str]:
        """Charge a card and return the gateway reference"""
        raise NotImplementedError

    async def verify_mobile_payment(self, operator_reference: str, provider: str, amount: Decimal) -> Optional[str]:
        """Confirm that a mobile money payment to us was made"""
        raise NotImplementedError

    async def process_bank_withdrawal(
        self,
        account_number: str,
        bank_name: str,
        amount: Decimal,
        currency: str
    ) -> Optional[str]:
        """Send money to a bank account"""
        raise NotImplementedError

    async def process_mobile_withdrawal(self, phone_number: str, provider: str, amount: Decimal) -> Optional[str]:
        """Send money to a mobile money account"""
        raise NotImplementedError


class MockPaymentGateway(PaymentGateway):
    """Mock gateway for development: every call succeeds with a random reference"""

    async def process_card_payment(self, card_number, card_holder_name, expiry_date, cvv, amount, currency):
        logger.info(f"Mock card payment of {amount} {currency} (card ending {card_number[-4:]})")
        return f"CARD-{uuid.uuid4().hex[:12].upper()}"

    async def verify_mobile_payment(self, operator_reference, provider, amount):
        logger.info(f"Mock mobile payment check {operator_reference} via {provider} for {amount}")
        return f"MOB-{uuid.uuid4().hex[:12].upper()}"

    async def process_bank_withdrawal(self, account_number, bank_name, amount, currency):
        logger.info(f"Mock bank withdrawal of {amount} {currency} to {bank_name}")
        return f"BANK-{uuid.uuid4().hex[:12].upper()}"

    async def process_mobile_withdrawal(self, phone_number, provider, amount):
        logger.info(f"Mock mobile withdrawal of {amount} via {provider}")
        return f"MOBW-{uuid.uuid4().hex[:12].upper()}"


# Global provider instance
_gateway: Optional[PaymentGateway] = None


def get_payment_gateway() -> PaymentGateway:
    """Get the configured payment gateway"""
    global _gateway
    if _gateway is None:
        _gateway = MockPaymentGateway()
    return _gateway


def set_payment_gateway(gateway: PaymentGateway) -> None:
    global _gateway
    _gateway = gateway
