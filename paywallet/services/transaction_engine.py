"""
Transaction engine: deposits, withdrawals, transfers and bill payments.

Every operation runs the same pipeline inside one database transaction:

    validate -> lock wallet(s) -> authorize -> price -> check limits
    -> (transfer) one-time code -> fraud screen -> settle -> persist -> commit

Wallet rows are locked with SELECT ... FOR UPDATE from load to commit, so two
operations on the same wallet never interleave their read-modify-write of
balance and usage. Transfers lock both wallets in ascending id order.

Deliberate failures (not found, unauthorized, validation, business rule) are
raised before anything is persisted. Settlement failures are not raised: the
attempt is persisted as an unsuccessful transaction with a static reason and
returned normally.
"""

import asyncio
import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from paywallet.core.clock import as_naive_utc, utcnow
from paywallet.core.config import settings
from paywallet.core.errors import BusinessRuleError, NotFoundError, ValidationError
from paywallet.core.metrics import FRAUD_ALERT_COUNT, TRANSACTION_COUNT
from paywallet.models.bill import Bill
from paywallet.models.enums import PaymentMethod, TransactionType, WalletStatus
from paywallet.models.offer import Offer
from paywallet.models.transaction import Transaction
from paywallet.models.wallet import Wallet
from paywallet.repos.offer_repo import get_offer_by_id
from paywallet.repos.transaction_repo import (
    add_bill,
    add_transaction,
    count_transactions,
    get_bills_by_ids,
    get_transactions,
)
from paywallet.repos.wallet_repo import get_wallet_by_id, get_wallet_for_update, lock_wallets_in_order
from paywallet.schemas.requests import DepositRequest, PayBillRequest, TransferRequest, WithdrawalRequest
from paywallet.schemas.responses import BillResponse, PagedResponse, TransactionResponse
from paywallet.services.access import authorize_wallet_access
from paywallet.services.bill_payment import BillPaymentProvider, get_bill_payment_provider
from paywallet.services.fees import calculate_fee, deposit_bonus, round_money
from paywallet.services.fraud import FraudDetector, get_fraud_detector
from paywallet.services.limits import can_transact, record_debit, reset_usage_if_rolled_over
from paywallet.services.notification import Notifier, alert_admins, get_notifier, notify_user
from paywallet.services.otp import OtpVerifier, get_otp_verifier
from paywallet.services.payment_gateway import PaymentGateway, get_payment_gateway

# Configure logging
logger = logging.getLogger(__name__)

# Safe, static reasons stored on failed transactions
SETTLEMENT_FAILED_REASON = "Payment processing failed"
SETTLEMENT_TIMEOUT_REASON = "Payment provider did not answer in time"
BILL_SETTLEMENT_FAILED_REASON = "Bill payment processing failed"

# Supported methods per flow, with the request fields each one needs
DEPOSIT_CHANNELS: Dict[PaymentMethod, Tuple[str, ...]] = {
    PaymentMethod.CREDIT_CARD: ("card_number", "card_holder_name", "expiry_date", "cvv"),
    PaymentMethod.BANK_TRANSFER: (),
    PaymentMethod.ORANGE_MONEY: ("mobile_operator_reference",),
    PaymentMethod.INWI_MONEY: ("mobile_operator_reference",),
}

WITHDRAWAL_CHANNELS: Dict[PaymentMethod, Tuple[str, ...]] = {
    PaymentMethod.BANK_TRANSFER: ("bank_account_number", "bank_name"),
    PaymentMethod.ORANGE_MONEY: ("recipient_phone_number",),
    PaymentMethod.INWI_MONEY: ("recipient_phone_number",),
    PaymentMethod.CASH: (),
}

BILL_REQUIRED_FIELDS = ("biller_name", "biller_reference", "customer_reference", "bill_type")


def _check_amount(amount: Decimal, operation: str) -> None:
    """Positive and expressed in whole cents"""
    if amount is None or not amount.is_finite() or amount <= 0:
        raise BusinessRuleError(f"The {operation} amount must be positive")
    if amount != round_money(amount):
        raise ValidationError(f"The {operation} amount cannot have more than 2 decimal places")


def _require_fields(request, fields: Tuple[str, ...], message: str) -> None:
    missing = [name for name in fields if not (getattr(request, name, None) or "").strip()]
    if missing:
        raise ValidationError(f"{message}: missing {', '.join(missing)}")


def _check_channel(channels: Dict[PaymentMethod, Tuple[str, ...]], request, operation: str) -> None:
    """Unsupported method is a business rule failure; missing details are a validation failure"""
    if request.payment_method not in channels:
        raise BusinessRuleError(f"Payment method {request.payment_method.value} is not supported for {operation}")
    _require_fields(request, channels[request.payment_method], f"Incomplete {request.payment_method.value} details")


def _require_active(wallet: Wallet, operation: str) -> None:
    if wallet.status != WalletStatus.ACTIVE:
        raise BusinessRuleError(f"Cannot {operation} a wallet with status {wallet.status.value}")


def _to_response(transaction: Transaction, bill: Optional[Bill] = None) -> TransactionResponse:
    response = TransactionResponse.model_validate(transaction)
    if bill is not None:
        response = response.model_copy(update={"bill": BillResponse.model_validate(bill)})
    return response


class TransactionEngine:
    """Money movement for one database session"""

    def __init__(
        self,
        session: AsyncSession,
        payment_gateway: PaymentGateway = None,
        bill_provider: BillPaymentProvider = None,
        fraud_detector: FraudDetector = None,
        notifier: Notifier = None,
        otp_verifier: OtpVerifier = None,
        settlement_timeout: float = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.session = session
        self.payment_gateway = payment_gateway or get_payment_gateway()
        self.bill_provider = bill_provider or get_bill_payment_provider()
        self.fraud_detector = fraud_detector or get_fraud_detector()
        self.notifier = notifier or get_notifier()
        self.otp_verifier = otp_verifier or get_otp_verifier()
        self.settlement_timeout = settlement_timeout or settings.settlement_timeout_seconds
        self.clock = clock

    def _now(self) -> datetime:
        return as_naive_utc(self.clock())

    async def _lock_wallet(self, wallet_id: UUID) -> Wallet:
        wallet = await get_wallet_for_update(self.session, wallet_id)
        if wallet is None:
            raise NotFoundError(f"Wallet {wallet_id} does not exist")
        return wallet

    async def _linked_offer(self, wallet: Wallet) -> Optional[Offer]:
        if wallet.offer_id is None:
            return None
        return await get_offer_by_id(self.session, wallet.offer_id)

    async def _report_suspicious(self, tx_type: TransactionType, message: str) -> None:
        """Fraud verdicts only alert; the operation carries on"""
        FRAUD_ALERT_COUNT.labels(type=tx_type.value).inc()
        await alert_admins(self.notifier, message)

    async def _internal_reference(self, prefix: str) -> str:
        """Reference for operations settled inside the wallet system"""
        return f"{prefix}-{uuid.uuid4().hex.upper()}"

    async def _settle(
        self,
        call: Callable[[], Awaitable[Optional[str]]],
        failure_reason: str,
        context: str
    ) -> Tuple[Optional[str], Optional[str]]:
        """
        Run one settlement call under the configured timeout.

        Any error, a timeout or an empty reference counts as a failed
        settlement; nothing from the provider leaks into the stored reason.

        Returns:
            (reference, None) on success, (None, failure reason) otherwise
        """
        try:
            reference = await asyncio.wait_for(call(), timeout=self.settlement_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Settlement timed out for {context}")
            return None, SETTLEMENT_TIMEOUT_REASON
        except Exception as e:
            logger.error(f"Settlement failed for {context}: {e}", exc_info=True)
            return None, failure_reason

        if not reference:
            logger.error(f"Settlement returned no reference for {context}")
            return None, failure_reason
        return reference, None

    def _fee_row(self, wallet: Wallet, fee: Decimal, primary: Transaction, now: datetime) -> Transaction:
        return Transaction(
            wallet_id=wallet.id,
            type=TransactionType.FEE,
            amount=fee,
            fee=Decimal("0"),
            description=f"{primary.type.value.replace('_', ' ').capitalize()} fee ({fee} {wallet.currency.value})",
            reference_number=str(primary.id),
            is_successful=True,
            created_at=now
        )

    def _count(self, transaction: Transaction) -> None:
        outcome = "succeeded" if transaction.is_successful else "settlement_failed"
        TRANSACTION_COUNT.labels(type=transaction.type.value, outcome=outcome).inc()

    async def deposit(self, wallet_id: UUID, request: DepositRequest, caller_id: UUID) -> TransactionResponse:
        """
        Credit a wallet from an external payment.

        The fee is netted from the credited amount and a recharge bonus is
        added on top; a Bonus row records the bonus. Deposits do not count
        against spending limits.

        Args:
            wallet_id: Wallet to credit
            request: Deposit request
            caller_id: Authenticated user, must own the wallet

        Returns:
            TransactionResponse, is_successful=False when settlement failed
        """
        logger.info(f"Initiating deposit of {request.amount} to wallet {wallet_id} via {request.payment_method.value}")
        _check_amount(request.amount, "deposit")
        now = self._now()
        amount = request.amount

        try:
            # Step 1: Lock and check the wallet
            wallet = await self._lock_wallet(wallet_id)
            await authorize_wallet_access(self.session, wallet, caller_id, "deposit to")
            _require_active(wallet, "deposit to")
            _check_channel(DEPOSIT_CHANNELS, request, "deposits")
            await reset_usage_if_rolled_over(self.session, wallet, now)

            # Step 2: Price
            offer = await self._linked_offer(wallet)
            fee = calculate_fee(TransactionType.DEPOSIT, amount, method=request.payment_method, offer=offer, now=now)
            bonus = deposit_bonus(amount, offer, now)

            # Step 3: Fraud screen
            if await self.fraud_detector.is_suspicious_deposit(wallet.id, amount, request.payment_method):
                await self._report_suspicious(
                    TransactionType.DEPOSIT,
                    f"Suspicious deposit of {amount} {wallet.currency.value} to wallet {wallet.id}"
                )

            # Step 4: Settle
            method = request.payment_method
            if method == PaymentMethod.CREDIT_CARD:
                call = lambda: self.payment_gateway.process_card_payment(
                    request.card_number, request.card_holder_name, request.expiry_date,
                    request.cvv, amount, wallet.currency.value
                )
            elif method == PaymentMethod.BANK_TRANSFER:
                # Bank transfers reach us before the request; only the ledger entry is made here
                call = lambda: self._internal_reference("DEP")
            else:
                call = lambda: self.payment_gateway.verify_mobile_payment(
                    request.mobile_operator_reference, method.value, amount
                )
            reference, failure = await self._settle(call, SETTLEMENT_FAILED_REASON, f"deposit to wallet {wallet.id}")

            # Step 5: Persist
            transaction = Transaction(
                wallet_id=wallet.id,
                type=TransactionType.DEPOSIT,
                amount=amount,
                fee=fee,
                description=request.description or f"Deposit via {method.value}",
                reference_number=reference,
                is_successful=reference is not None,
                failure_reason=failure,
                payment_method=method,
                created_at=now
            )
            await add_transaction(self.session, transaction)

            if transaction.is_successful:
                wallet.balance += amount - fee + bonus
                wallet.updated_at = now
                if bonus > 0:
                    await add_transaction(self.session, Transaction(
                        wallet_id=wallet.id,
                        type=TransactionType.BONUS,
                        amount=bonus,
                        fee=Decimal("0"),
                        description=f"Recharge bonus ({bonus} {wallet.currency.value})",
                        reference_number=str(transaction.id),
                        is_successful=True,
                        created_at=now
                    ))

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        self._count(transaction)
        if transaction.is_successful:
            await notify_user(
                self.notifier,
                wallet.owner_id,
                f"Deposit of {amount} {wallet.currency.value} succeeded. New balance: {wallet.balance} {wallet.currency.value}"
            )
            logger.info(f"Deposit {transaction.id} credited wallet {wallet.id}, fee {fee}, bonus {bonus}")
        return _to_response(transaction)

    async def withdraw(self, wallet_id: UUID, request: WithdrawalRequest, caller_id: UUID) -> TransactionResponse:
        """
        Pay money out of a wallet. The wallet is debited amount + fee and the
        fee gets its own Fee row.

        Raises:
            NotFoundError, UnauthorizedError, ValidationError, BusinessRuleError
            (InsufficientBalanceError, OfferLimitExceededError)
        """
        logger.info(f"Initiating withdrawal of {request.amount} from wallet {wallet_id} via {request.payment_method.value}")
        _check_amount(request.amount, "withdrawal")
        now = self._now()
        amount = request.amount

        try:
            # Step 1: Lock and check the wallet
            wallet = await self._lock_wallet(wallet_id)
            await authorize_wallet_access(self.session, wallet, caller_id, "withdraw from")
            _require_active(wallet, "withdraw from")
            _check_channel(WITHDRAWAL_CHANNELS, request, "withdrawals")

            # Step 2: Price and check limits
            offer = await self._linked_offer(wallet)
            fee = calculate_fee(TransactionType.WITHDRAWAL, amount, method=request.payment_method, offer=offer, now=now)
            total_debit = amount + fee
            ok, error = await can_transact(self.session, wallet, total_debit, offer, now)
            if not ok:
                logger.warning(f"Withdrawal from wallet {wallet.id} refused: {error.message}")
                raise error

            # Step 3: Fraud screen
            if await self.fraud_detector.is_suspicious_withdrawal(wallet.id, amount, request.payment_method):
                await self._report_suspicious(
                    TransactionType.WITHDRAWAL,
                    f"Suspicious withdrawal of {amount} {wallet.currency.value} from wallet {wallet.id}"
                )

            # Step 4: Settle
            method = request.payment_method
            if method == PaymentMethod.BANK_TRANSFER:
                call = lambda: self.payment_gateway.process_bank_withdrawal(
                    request.bank_account_number, request.bank_name, amount, wallet.currency.value
                )
            elif method == PaymentMethod.CASH:
                # Cash is handed over by a partner agent against this reference
                call = lambda: self._internal_reference("CASH")
            else:
                call = lambda: self.payment_gateway.process_mobile_withdrawal(
                    request.recipient_phone_number, method.value, amount
                )
            reference, failure = await self._settle(call, SETTLEMENT_FAILED_REASON, f"withdrawal from wallet {wallet.id}")

            # Step 5: Persist
            transaction = Transaction(
                wallet_id=wallet.id,
                type=TransactionType.WITHDRAWAL,
                amount=amount,
                fee=fee,
                description=request.description or f"Withdrawal via {method.value}",
                reference_number=reference,
                is_successful=reference is not None,
                failure_reason=failure,
                payment_method=method,
                created_at=now
            )
            await add_transaction(self.session, transaction)

            if transaction.is_successful:
                record_debit(wallet, total_debit)
                wallet.updated_at = now
                if fee > 0:
                    await add_transaction(self.session, self._fee_row(wallet, fee, transaction, now))

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        self._count(transaction)
        if transaction.is_successful:
            await notify_user(
                self.notifier,
                wallet.owner_id,
                f"Withdrawal of {amount} {wallet.currency.value} succeeded. New balance: {wallet.balance} {wallet.currency.value}"
            )
            logger.info(f"Withdrawal {transaction.id} debited wallet {wallet.id} by {total_debit}")
        return _to_response(transaction)

    async def transfer(self, request: TransferRequest, caller_id: UUID) -> TransactionResponse:
        """
        Move money between two wallets of the same currency.

        The source pays amount + fee, the destination receives amount. Above
        the step-up threshold a one-time code is required; a code given for
        a smaller transfer is still checked.

        Raises:
            NotFoundError, UnauthorizedError, BusinessRuleError
        """
        logger.info(
            f"Initiating transfer of {request.amount} from wallet {request.source_wallet_id} "
            f"to wallet {request.destination_wallet_id}"
        )
        _check_amount(request.amount, "transfer")
        if request.source_wallet_id == request.destination_wallet_id:
            raise BusinessRuleError("Cannot transfer to the same wallet")
        now = self._now()
        amount = request.amount

        try:
            # Step 1: Lock both wallets, lowest id first
            locked = await lock_wallets_in_order(
                self.session, [request.source_wallet_id, request.destination_wallet_id]
            )
            source = locked.get(request.source_wallet_id)
            if source is None:
                raise NotFoundError(f"Source wallet {request.source_wallet_id} does not exist")
            destination = locked.get(request.destination_wallet_id)
            if destination is None:
                raise NotFoundError(f"Destination wallet {request.destination_wallet_id} does not exist")

            await authorize_wallet_access(self.session, source, caller_id, "transfer from")
            _require_active(source, "transfer from")
            _require_active(destination, "transfer to")
            if source.currency != destination.currency:
                raise BusinessRuleError("Transfers between different currencies are not supported")

            # Step 2: Price and check limits
            offer = await self._linked_offer(source)
            fee = calculate_fee(TransactionType.TRANSFER, amount, offer=offer, now=now)
            total_debit = amount + fee
            ok, error = await can_transact(self.session, source, total_debit, offer, now)
            if not ok:
                logger.warning(f"Transfer from wallet {source.id} refused: {error.message}")
                raise error

            # Step 3: Step-up authentication
            if amount > settings.transfer_otp_threshold and not request.otp_code:
                raise BusinessRuleError(
                    f"A one-time code is required for transfers above {settings.transfer_otp_threshold}"
                )
            if request.otp_code:
                if not await self.otp_verifier.verify_code(source.owner_id, request.otp_code):
                    raise BusinessRuleError("The one-time code is invalid or has expired")

            # Step 4: Fraud screen
            if await self.fraud_detector.is_suspicious_transfer(source.id, destination.id, amount):
                await self._report_suspicious(
                    TransactionType.TRANSFER,
                    f"Suspicious transfer of {amount} {source.currency.value} from wallet {source.id} to {destination.id}"
                )

            # Step 5: Settle inside the wallet system
            reference, failure = await self._settle(
                lambda: self._internal_reference("TRF"),
                SETTLEMENT_FAILED_REASON,
                f"transfer from wallet {source.id}"
            )

            # Step 6: Persist
            transaction = Transaction(
                wallet_id=source.id,
                destination_wallet_id=destination.id,
                type=TransactionType.TRANSFER,
                amount=amount,
                fee=fee,
                description=request.description or "Wallet to wallet transfer",
                reference_number=reference,
                is_successful=reference is not None,
                failure_reason=failure,
                created_at=now
            )
            await add_transaction(self.session, transaction)

            if transaction.is_successful:
                record_debit(source, total_debit)
                source.updated_at = now
                destination.balance += amount
                destination.updated_at = now
                if fee > 0:
                    await add_transaction(self.session, self._fee_row(source, fee, transaction, now))

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        self._count(transaction)
        if transaction.is_successful:
            currency = source.currency.value
            await notify_user(
                self.notifier,
                source.owner_id,
                f"Transfer of {amount} {currency} sent. New balance: {source.balance} {currency}"
            )
            await notify_user(
                self.notifier,
                destination.owner_id,
                f"Transfer of {amount} {currency} received from {source.owner_name}. "
                f"New balance: {destination.balance} {currency}"
            )
            logger.info(f"Transfer {transaction.id} completed: {source.id} -> {destination.id}, fee {fee}")
        return _to_response(transaction)

    async def pay_bill(self, wallet_id: UUID, request: PayBillRequest, caller_id: UUID) -> TransactionResponse:
        """
        Pay a bill from a wallet.

        The bill is verified with the biller first; a bill the biller does not
        recognise fails with BusinessRuleError and nothing is written. Once
        payment is attempted the Bill row is kept either way and is marked
        paid only on success.

        Raises:
            NotFoundError, UnauthorizedError, ValidationError, BusinessRuleError
        """
        logger.info(f"Initiating bill payment of {request.amount} from wallet {wallet_id} to {request.biller_name}")
        _check_amount(request.amount, "payment")
        _require_fields(request, BILL_REQUIRED_FIELDS, "Incomplete bill details")
        now = self._now()
        amount = request.amount

        try:
            # Step 1: Lock and check the wallet
            wallet = await self._lock_wallet(wallet_id)
            await authorize_wallet_access(self.session, wallet, caller_id, "pay bills from")
            _require_active(wallet, "pay bills from")

            # Step 2: Price and check limits
            offer = await self._linked_offer(wallet)
            fee = calculate_fee(TransactionType.BILL_PAYMENT, amount, bill_type=request.bill_type, offer=offer, now=now)
            total_debit = amount + fee
            ok, error = await can_transact(self.session, wallet, total_debit, offer, now)
            if not ok:
                logger.warning(f"Bill payment from wallet {wallet.id} refused: {error.message}")
                raise error

            # Step 3: Fraud screen
            if await self.fraud_detector.is_suspicious_bill_payment(wallet.id, amount, request.biller_name):
                await self._report_suspicious(
                    TransactionType.BILL_PAYMENT,
                    f"Suspicious bill payment of {amount} {wallet.currency.value} from wallet {wallet.id} "
                    f"to {request.biller_name}"
                )

            # Step 4: Verify the bill with the biller
            verification = await self.bill_provider.verify_bill(
                request.biller_name, request.biller_reference, request.customer_reference, amount
            )
            if not verification.is_valid:
                logger.warning(f"Bill verification failed for wallet {wallet.id}: {verification.message}")
                raise BusinessRuleError(f"Bill verification failed: {verification.message}")

            # Step 5: Settle
            reference, failure = await self._settle(
                lambda: self.bill_provider.pay_bill(
                    request.biller_name, request.biller_reference, request.customer_reference,
                    amount, request.bill_type
                ),
                BILL_SETTLEMENT_FAILED_REASON,
                f"bill payment from wallet {wallet.id}"
            )

            # Step 6: Persist
            bill = Bill(
                biller_name=request.biller_name,
                biller_reference=request.biller_reference,
                customer_reference=request.customer_reference,
                amount=amount,
                due_date=as_naive_utc(verification.due_date) if verification.due_date else None,
                is_paid=reference is not None,
                payment_date=now if reference is not None else None,
                bill_type=request.bill_type,
                created_at=now
            )
            await add_bill(self.session, bill)

            transaction = Transaction(
                wallet_id=wallet.id,
                type=TransactionType.BILL_PAYMENT,
                amount=amount,
                fee=fee,
                description=f"{request.bill_type} bill - {request.biller_name}",
                reference_number=reference,
                is_successful=reference is not None,
                failure_reason=failure,
                bill_id=bill.id,
                created_at=now
            )
            await add_transaction(self.session, transaction)

            if transaction.is_successful:
                record_debit(wallet, total_debit)
                wallet.updated_at = now
                if fee > 0:
                    await add_transaction(self.session, self._fee_row(wallet, fee, transaction, now))

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        self._count(transaction)
        if transaction.is_successful:
            await notify_user(
                self.notifier,
                wallet.owner_id,
                f"Bill payment to {request.biller_name} of {amount} {wallet.currency.value} succeeded. "
                f"New balance: {wallet.balance} {wallet.currency.value}"
            )
            logger.info(f"Bill payment {transaction.id} debited wallet {wallet.id} by {total_debit}")
        return _to_response(transaction, bill)

    async def get_wallet_transactions(
        self,
        wallet_id: UUID,
        caller_id: UUID,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        tx_type: Optional[TransactionType] = None,
        page_number: int = 1,
        page_size: int = 10
    ) -> PagedResponse[TransactionResponse]:
        """
        A page of the wallet's history, newest first, incoming transfers
        included. Readable by the owner and by admins.
        """
        wallet = await get_wallet_by_id(self.session, wallet_id)
        if wallet is None:
            raise NotFoundError(f"Wallet {wallet_id} does not exist")
        await authorize_wallet_access(self.session, wallet, caller_id, "view transactions of", allow_admin=True)

        if start_date is not None:
            start_date = as_naive_utc(start_date)
        if end_date is not None:
            end_date = as_naive_utc(end_date)

        transactions = await get_transactions(
            self.session, wallet_id, start_date, end_date, tx_type, page_number, page_size
        )
        total_count = await count_transactions(self.session, wallet_id, start_date, end_date, tx_type)
        bills = await get_bills_by_ids(self.session, [t.bill_id for t in transactions if t.bill_id])

        items = [_to_response(t, bills.get(t.bill_id)) for t in transactions]
        return PagedResponse[TransactionResponse].build(items, page_number, page_size, total_count)
