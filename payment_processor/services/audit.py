"""Payment Audit Log - builds audit entries and answers queries over them"""

import logging
from collections import Counter
from datetime import date, datetime
from typing import Iterable, List, Optional

from payment_processor.config import settings
from payment_processor.domain.exceptions import InvalidQueryError
from payment_processor.domain.models import (
    FRAUD_CHECK_NOT_PERFORMED,
    AccountAuditAnalytics,
    AuditAnalytics,
    AuditEntry,
    AuditTrail,
    DailyAuditSummary,
    Payment,
    PaymentStatus,
)
from payment_processor.infrastructure.database.repositories import AuditRepository
from payment_processor.utils.date_utils import day_bounds, utcnow


def _processing_times(entries: Iterable[AuditEntry]) -> List[int]:
    return [e.processing_time_ms for e in entries if e.processing_time_ms is not None]


def _average(values: List[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def _fraud_failed(entry: AuditEntry) -> bool:
    # None means the screener never ran, which is not a fraud verdict
    return entry.fraud_check_passed is False


def build_audit_entry(payment: Payment, trail: AuditTrail, processing_time_ms: Optional[int]) -> AuditEntry:
    """Snapshot a terminal payment together with the decisions that led there"""
    fraud = trail.fraud_check
    return AuditEntry(
        transaction_id=payment.transaction_id,
        from_account=payment.from_account,
        to_account=payment.to_account,
        amount=payment.amount,
        currency=payment.currency,
        payment_type=payment.payment_type,
        description=payment.description,
        payment_initiated_at=payment.created_at,
        fraud_check_passed=None if fraud is None else not fraud.fraudulent,
        fraud_reason=FRAUD_CHECK_NOT_PERFORMED if fraud is None else fraud.reason,
        fraud_risk_score=None if fraud is None else fraud.risk_score,
        fraud_checked_at=trail.fraud_checked_at,
        source_account_valid=trail.source_account_valid,
        destination_account_valid=trail.destination_account_valid,
        sufficient_balance=trail.sufficient_balance,
        final_status=payment.status,
        failure_reason=payment.failure_reason,
        processing_time_ms=processing_time_ms,
        audited_at=utcnow(),
    )


class AuditService:
    """
    Append-only audit trail for terminal payment outcomes.

    Writes flush into the caller's session; the orchestrator decides when
    they are committed. Analytics are derived on demand and never stored.
    """

    def __init__(
        self,
        repository: AuditRepository,
        review_risk_score: float | None = None,
        slow_processing_ms: int | None = None,
    ):
        self.repository = repository
        self.review_risk_score = (
            settings.audit_review_risk_score if review_risk_score is None else review_risk_score
        )
        self.slow_processing_ms = (
            settings.audit_slow_processing_ms if slow_processing_ms is None else slow_processing_ms
        )

    def record(self, payment: Payment, trail: AuditTrail, processing_time_ms: Optional[int]) -> AuditEntry:
        """Append the audit entry for a terminal payment"""
        entry = build_audit_entry(payment, trail, processing_time_ms)
        self.repository.append(entry)
        logging.info(
            "Audit entry recorded",
            extra={"transaction_id": payment.transaction_id, "status": payment.status.value},
        )
        return entry

    # Queries

    def by_transaction_id(self, transaction_id: str) -> List[AuditEntry]:
        if not transaction_id or not transaction_id.strip():
            raise InvalidQueryError("Transaction ID must not be empty")
        return self.repository.find_by_transaction_id(transaction_id)

    def by_account(self, account_number: str) -> List[AuditEntry]:
        if not account_number or not account_number.strip():
            raise InvalidQueryError("Account number must not be empty")
        return self.repository.find_by_account(account_number)

    def by_status(self, status: PaymentStatus) -> List[AuditEntry]:
        return self.repository.find_by_status(status)

    def by_fraud_outcome(self, fraudulent: bool) -> List[AuditEntry]:
        """Entries whose fraud check failed (fraudulent=True) or passed"""
        return self.repository.find_by_fraud_check_passed(not fraudulent)

    def by_time_range(self, start: datetime, end: datetime) -> List[AuditEntry]:
        if start > end:
            raise InvalidQueryError("Start date must be before end date")
        return self.repository.find_between(start, end)

    def all_entries(self) -> List[AuditEntry]:
        return self.repository.find_all()

    # Analytics

    def average_processing_time_ms(self) -> float:
        """Mean processing time of completed payments; 0.0 when there are none"""
        return _average(_processing_times(self.by_status(PaymentStatus.COMPLETED)))

    def max_processing_time_ms(self) -> int:
        return max(_processing_times(self.by_status(PaymentStatus.COMPLETED)), default=0)

    def fraud_detection_rate(self) -> float:
        """Fraction of audited payments whose fraud check failed"""
        entries = self.all_entries()
        if not entries:
            return 0.0
        return sum(1 for e in entries if _fraud_failed(e)) / len(entries)

    def is_high_risk(self, entry: AuditEntry) -> bool:
        """
        Flag an entry for manual review.

        Any one of these is enough:
        - risk score above the review threshold
        - fraud check failed
        - processing slower than the slow-processing threshold
        """
        if entry.fraud_risk_score is not None and entry.fraud_risk_score > self.review_risk_score:
            return True
        if _fraud_failed(entry):
            return True
        if entry.processing_time_ms is not None and entry.processing_time_ms > self.slow_processing_ms:
            return True
        return False

    def high_risk_entries(self) -> List[AuditEntry]:
        flagged = [e for e in self.all_entries() if self.is_high_risk(e)]
        logging.info("High-risk audit entries found", extra={"count": len(flagged)})
        return flagged

    def analytics(self) -> AuditAnalytics:
        entries = self.all_entries()
        completed_times = _processing_times(e for e in entries if e.final_status == PaymentStatus.COMPLETED)
        return AuditAnalytics(
            total_audited=len(entries),
            average_processing_time_ms=_average(completed_times),
            max_processing_time_ms=max(completed_times, default=0),
            fraud_detection_rate=(sum(1 for e in entries if _fraud_failed(e)) / len(entries)) if entries else 0.0,
            high_risk_count=sum(1 for e in entries if self.is_high_risk(e)),
        )

    def account_analytics(self, account_number: str) -> AccountAuditAnalytics:
        entries = self.by_account(account_number)
        times = _processing_times(entries)
        fraud_count = sum(1 for e in entries if _fraud_failed(e))

        return AccountAuditAnalytics(
            account_number=account_number,
            total_transactions=len(entries),
            status_breakdown=dict(Counter(e.final_status.value for e in entries)),
            fraud_detected_count=fraud_count,
            fraud_rate=fraud_count / len(entries) if entries else 0.0,
            source_validation_failures=sum(1 for e in entries if e.source_account_valid is False),
            destination_validation_failures=sum(1 for e in entries if e.destination_account_valid is False),
            insufficient_balance_count=sum(1 for e in entries if e.sufficient_balance is False),
            average_processing_time_ms=_average(times),
            max_processing_time_ms=max(times, default=0),
        )

    def daily_summary(self, day: date) -> DailyAuditSummary:
        start, end = day_bounds(day)
        entries = self.by_time_range(start, end)
        successes = sum(1 for e in entries if e.final_status == PaymentStatus.COMPLETED)

        return DailyAuditSummary(
            day=day.isoformat(),
            total_transactions=len(entries),
            successful_transactions=successes,
            failed_transactions=len(entries) - successes,
            success_rate=successes / len(entries) if entries else 0.0,
            fraud_detected_count=sum(1 for e in entries if _fraud_failed(e)),
            average_processing_time_ms=_average(_processing_times(entries)),
            failure_reasons=dict(Counter(e.failure_reason for e in entries if e.failure_reason)),
        )
