"""
Fraud screening.

Verdicts are advisory: the transaction engine alerts admins on a suspicious
verdict and carries on.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from paywallet.core.config import settings
from paywallet.models.enums import PaymentMethod

logger = logging.getLogger(__name__)


class FraudDetector:
    """Base fraud detection interface"""

    async def is_suspicious_deposit(self, wallet_id: UUID, amount: Decimal, method: PaymentMethod) -> bool:
        raise NotImplementedError

    async def is_suspicious_withdrawal(self, wallet_id: UUID, amount: Decimal, method: PaymentMethod) -> bool:
        raise NotImplementedError

    async def is_suspicious_transfer(self, source_wallet_id: UUID, destination_wallet_id: UUID, amount: Decimal) -> bool:
        raise NotImplementedError

    async def is_suspicious_bill_payment(self, wallet_id: UUID, amount: Decimal, biller_name: str) -> bool:
        raise NotImplementedError


class ThresholdFraudDetector(FraudDetector):
    """Flags any operation above a configured amount"""

    def __init__(
        self,
        deposit_threshold: Decimal = None,
        withdrawal_threshold: Decimal = None,
        transfer_threshold: Decimal = None,
        bill_threshold: Decimal = None
    ):
        self.deposit_threshold = deposit_threshold or settings.fraud_deposit_threshold
        self.withdrawal_threshold = withdrawal_threshold or settings.fraud_withdrawal_threshold
        self.transfer_threshold = transfer_threshold or settings.fraud_transfer_threshold
        self.bill_threshold = bill_threshold or settings.fraud_bill_threshold

    async def is_suspicious_deposit(self, wallet_id, amount, method):
        if amount > self.deposit_threshold:
            logger.warning(f"Suspicious deposit detected: {amount} to wallet {wallet_id} via {method.value}")
            return True
        return False

    async def is_suspicious_withdrawal(self, wallet_id, amount, method):
        if amount > self.withdrawal_threshold:
            logger.warning(f"Suspicious withdrawal detected: {amount} from wallet {wallet_id} via {method.value}")
            return True
        return False

    async def is_suspicious_transfer(self, source_wallet_id, destination_wallet_id, amount):
        if amount > self.transfer_threshold:
            logger.warning(
                f"Suspicious transfer detected: {amount} from wallet {source_wallet_id} to {destination_wallet_id}"
            )
            return True
        return False

    async def is_suspicious_bill_payment(self, wallet_id, amount, biller_name):
        if amount > self.bill_threshold:
            logger.warning(f"Suspicious bill payment detected: {amount} from wallet {wallet_id} to {biller_name}")
            return True
        return False


_detector: Optional[FraudDetector] = None


def get_fraud_detector() -> FraudDetector:
    """Get the configured fraud detector"""
    global _detector
    if _detector is None:
        _detector = ThresholdFraudDetector()
    return _detector


def set_fraud_detector(detector: FraudDetector) -> None:
    global _detector
    _detector = detector
