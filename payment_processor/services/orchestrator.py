"""Payment orchestrator - drives a transfer through the validation pipeline"""

import logging
import time
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from payment_processor.config import settings
from payment_processor.domain.exceptions import (
    AccountServiceError,
    FraudServiceError,
    InsufficientFundsError,
    PaymentStoreError,
)
from payment_processor.domain.models import (
    AuditTrail,
    FraudCheck,
    FraudCheckRequest,
    Payment,
    PaymentRequest,
    PaymentResult,
    PaymentStatus,
    PaymentType,
)
from payment_processor.domain.state_machine import transition
from payment_processor.domain.validation import validate_payment_request
from payment_processor.infrastructure.database.repositories import PaymentRepository
from payment_processor.infrastructure.observability.logging import log_payment_outcome
from payment_processor.infrastructure.observability.metrics import (
    audit_write_failure_counter,
    collaborator_failure_counter,
    funds_reversal_counter,
    processing_error_counter,
    record_fraud_verdict,
    record_payment_outcome,
)
from payment_processor.services.accounts import AccountService
from payment_processor.services.audit import AuditService
from payment_processor.utils.date_utils import elapsed_ms, utcnow


class FraudScreener(Protocol):
    async def check_fraud(self, request: FraudCheckRequest) -> FraudCheck:
        ...


class PaymentOrchestrator:
    """
    Runs one payment through accounts -> fraud -> balance -> funds movement.

    Every status change is committed before the next step starts. A terminal
    status is committed together with its audit entry, so a terminal payment
    never exists without one. Business-rule failures come back as results;
    only a failure to create the pending record raises.
    """

    def __init__(
        self,
        db: Session,
        accounts: AccountService,
        fraud: FraudScreener,
        audit: AuditService,
        payments: PaymentRepository | None = None,
        supported_currencies: List[str] | None = None,
        request_id: Optional[str] = None,
    ):
        self.db = db
        self.accounts = accounts
        self.fraud = fraud
        self.audit = audit
        self.payments = payments or PaymentRepository(db)
        self.supported_currencies = supported_currencies or settings.supported_currencies
        self.request_id = request_id

    async def process(self, request: PaymentRequest) -> PaymentResult:
        """
        Process a transfer request end to end.

        Flow:
        1. Validate request structure (raises, nothing persisted)
        2. Create PENDING payment
        3. Validate source account
        4. Validate destination account
        5. Fraud screening
        6. Balance check
        7. PROCESSING, move funds
        8. COMPLETED + audit

        Raises:
            InvalidPaymentRequestError: malformed request
            PaymentStoreError: the pending record could not be written
        """
        validate_payment_request(request, self.supported_currencies)
        request = replace(
            request,
            amount=Decimal(str(request.amount)),
            payment_type=PaymentType(request.payment_type),
        )

        logging.info(
            "Processing payment",
            extra={
                "request_id": self.request_id,
                "from_account": request.from_account,
                "to_account": request.to_account,
                "amount": str(request.amount),
            },
        )

        started = time.perf_counter()
        payment = Payment.from_request(request)
        try:
            self.payments.save(payment)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logging.error(f"Could not create payment record: {e}", extra={"request_id": self.request_id})
            raise PaymentStoreError("Could not create payment record") from e
        except Exception:
            self.db.rollback()
            raise

        committed = replace(payment)
        trail = AuditTrail()
        funds_moved = False

        try:
            # Step 1: source account
            source = await self.accounts.validate_account(payment.from_account)
            trail.source_account_valid = source.valid
            if not source.valid:
                return self._reject(
                    payment,
                    PaymentStatus.ACCOUNT_VALIDATION_FAILED,
                    f"Source account validation failed: {source.message}",
                    trail,
                    started,
                )

            # Step 2: destination account
            destination = await self.accounts.validate_account(payment.to_account)
            trail.destination_account_valid = destination.valid
            if not destination.valid:
                return self._reject(
                    payment,
                    PaymentStatus.ACCOUNT_VALIDATION_FAILED,
                    f"Destination account validation failed: {destination.message}",
                    trail,
                    started,
                )

            # Step 3: fraud screening
            fraud_check = await self.fraud.check_fraud(
                FraudCheckRequest(
                    transaction_id=payment.transaction_id,
                    from_account=payment.from_account,
                    to_account=payment.to_account,
                    amount=payment.amount,
                    currency=payment.currency,
                )
            )
            trail.fraud_check = fraud_check
            trail.fraud_checked_at = utcnow()
            record_fraud_verdict(fraud_check.fraudulent)
            if fraud_check.fraudulent:
                return self._reject(
                    payment,
                    PaymentStatus.FRAUD_CHECK_FAILED,
                    f"Fraud detected: {fraud_check.reason}",
                    trail,
                    started,
                )

            # Step 4: balance
            balance = await self.accounts.check_balance(payment.from_account, payment.amount)
            trail.sufficient_balance = balance.sufficient_balance
            if not balance.sufficient_balance:
                return self._reject(
                    payment,
                    PaymentStatus.INSUFFICIENT_BALANCE,
                    balance.message,
                    trail,
                    started,
                )

            # Step 5: move funds
            transition(payment, PaymentStatus.PROCESSING)
            self.payments.save(payment)
            self.db.commit()
            committed = replace(payment)

            await self.accounts.transfer(payment.from_account, payment.to_account, payment.amount)
            funds_moved = True

            # Step 6: complete, status and audit land in one commit
            transition(payment, PaymentStatus.COMPLETED)
            self._finish(payment, trail, started)
            return PaymentResult.from_payment(payment)

        except Exception as e:
            logging.exception(
                "Error processing payment",
                extra={"request_id": self.request_id, "transaction_id": payment.transaction_id},
            )
            return await self._fail(committed, e, trail, started, funds_moved)

    def _reject(
        self,
        payment: Payment,
        status: PaymentStatus,
        reason: str,
        trail: AuditTrail,
        started: float,
    ) -> PaymentResult:
        """Business-rule failure: terminal status plus audit, no exception"""
        transition(payment, status, reason)
        self._finish(payment, trail, started)
        return PaymentResult.from_payment(payment)

    def _finish(self, payment: Payment, trail: AuditTrail, started: float) -> None:
        finished = time.perf_counter()
        self.payments.save(payment)
        self.audit.record(payment, trail, elapsed_ms(started, finished))
        self.db.commit()

        record_payment_outcome(payment.status, finished - started)
        log_payment_outcome(payment, elapsed_ms(started, finished), self.request_id)

    async def _fail(
        self,
        payment: Payment,
        error: Exception,
        trail: AuditTrail,
        started: float,
        funds_moved: bool,
    ) -> PaymentResult:
        """
        Infrastructure failure after the pending record exists.

        Uncommitted work is rolled back and moved funds are reversed before
        the last committed state is marked FAILED. The FAILED status and its
        audit entry are committed separately so an audit failure cannot hide
        the payment outcome. When the FAILED status itself cannot be stored
        no audit entry is written, so the audit trail never claims a status
        the payment store does not hold.
        """
        self.db.rollback()
        processing_error_counter.labels(error_type=type(error).__name__).inc()
        if isinstance(error, FraudServiceError):
            collaborator_failure_counter.labels(collaborator="fraud").inc()
        elif isinstance(error, (AccountServiceError, InsufficientFundsError)):
            collaborator_failure_counter.labels(collaborator="accounts").inc()

        if funds_moved:
            try:
                await self.accounts.reverse_transfer(payment.from_account, payment.to_account, payment.amount)
                funds_reversal_counter.labels(outcome="applied").inc()
            except Exception:
                funds_reversal_counter.labels(outcome="failed").inc()
                logging.critical(
                    "Could not reverse funds movement for failed payment",
                    exc_info=True,
                    extra={"transaction_id": payment.transaction_id},
                )

        committed_status = payment.status
        transition(payment, PaymentStatus.FAILED, f"Payment processing failed: {error}")
        finished = time.perf_counter()

        try:
            self.payments.save(payment)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            audit_write_failure_counter.inc()
            # No audit entry either: the stored payment is still non-terminal
            logging.error(
                "Could not persist FAILED status, audit entry skipped",
                exc_info=True,
                extra={"transaction_id": payment.transaction_id, "stored_status": committed_status.value},
            )
        else:
            self._record_failure_audit(payment, trail, elapsed_ms(started, finished))

        record_payment_outcome(payment.status, finished - started)
        log_payment_outcome(payment, elapsed_ms(started, finished), self.request_id)
        return PaymentResult.from_payment(payment)

    def _record_failure_audit(self, payment: Payment, trail: AuditTrail, processing_time_ms: int) -> None:
        try:
            self.audit.record(payment, trail, processing_time_ms)
            self.db.commit()
        except Exception:
            self.db.rollback()
            audit_write_failure_counter.inc()
            logging.error(
                "Failed to create audit record for failed payment",
                exc_info=True,
                extra={"transaction_id": payment.transaction_id},
            )

    def get_status(self, transaction_id: str) -> Optional[PaymentResult]:
        """Current result for a transaction, or None when unknown"""
        payment = self.payments.get_by_transaction_id(transaction_id)
        return PaymentResult.from_payment(payment) if payment else None

    def list_by_account(self, account_number: str) -> List[Payment]:
        return self.payments.list_by_account(account_number)

    def list_all(self) -> List[Payment]:
        return self.payments.list_all()

    def list_by_status(self, status: PaymentStatus) -> List[Payment]:
        return self.payments.list_by_status(status)
