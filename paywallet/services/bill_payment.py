"""
Bill payment provider: verifies bills with the biller, then pays them
"""

import logging
import uuid
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from paywallet.core.clock import utcnow
from paywallet.schemas.responses import BillVerificationResult

# Configure logging
logger = logging.getLogger(__name__)

# Categories the billers accept
SUPPORTED_BILL_TYPES = {"telecom", "water", "eau", "electricity", "électricité", "electricite", "taxes"}


class BillPaymentProvider:
    """Base bill payment interface"""

    async def verify_bill(
        self,
        biller_name: str,
        biller_reference: str,
        customer_reference: str,
        amount: Decimal
    ) -> BillVerificationResult:
        """
        Ask the biller whether the bill exists and matches the amount.

        Args:
            biller_name: Biller (e.g. telecom operator, utility)
            biller_reference: Bill reference on the biller side
            customer_reference: Customer account at the biller
            amount: Amount the customer wants to pay

        Returns:
            BillVerificationResult
        """
        raise NotImplementedError

    async def pay_bill(
        self,
        biller_name: str,
        biller_reference: str,
        customer_reference: str,
        amount: Decimal,
        bill_type: str
    ) -> Optional[str]:
        """Pay the bill and return the biller's payment reference"""
        raise NotImplementedError


class MockBillPaymentProvider(BillPaymentProvider):
    """Mock provider for development: bills are valid and due in 15 days"""

    async def verify_bill(self, biller_name, biller_reference, customer_reference, amount):
        logger.info(f"Mock bill verification: {biller_name} ref {biller_reference} amount {amount}")
        return BillVerificationResult(
            is_valid=True,
            message="Bill verified",
            due_date=utcnow() + timedelta(days=15)
        )

    async def pay_bill(self, biller_name, biller_reference, customer_reference, amount, bill_type):
        if bill_type.strip().lower() not in SUPPORTED_BILL_TYPES:
            raise ValueError(f"Unsupported bill type: {bill_type}")
        logger.info(f"Mock bill payment: {biller_name} ({bill_type}) ref {biller_reference} amount {amount}")
        return f"BILL-{uuid.uuid4().hex[:12].upper()}"


# Global provider instance
_provider: Optional[BillPaymentProvider] = None


def get_bill_payment_provider() -> BillPaymentProvider:
    """Get the configured bill payment provider"""
    global _provider
    if _provider is None:
        _provider = MockBillPaymentProvider()
    return _provider


def set_bill_payment_provider(provider: BillPaymentProvider) -> None:
    global _provider
    _provider = provider
