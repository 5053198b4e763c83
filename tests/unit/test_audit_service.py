"""Unit tests for audit queries and analytics"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from sqlalchemy.orm import Session
from payment_processor.domain.exceptions import InvalidQueryError
from payment_processor.domain.models import (
    FRAUD_CHECK_NOT_PERFORMED,
    AuditEntry,
    AuditTrail,
    FraudCheck,
    Payment,
    PaymentRequest,
    PaymentStatus,
    PaymentType,
)
from payment_processor.domain.state_machine import transition
from payment_processor.infrastructure.database.repositories import AuditRepository
from payment_processor.services.audit import AuditService, build_audit_entry

NOON = datetime(2024, 3, 15, 12, 0, 0)


def _entry(**overrides) -> AuditEntry:
    fields = dict(
        transaction_id="tx",
        from_account="ACC001",
        to_account="ACC002",
        amount=Decimal("100.00"),
        currency="USD",
        payment_type=PaymentType.DOMESTIC_TRANSFER,
        final_status=PaymentStatus.COMPLETED,
        fraud_check_passed=True,
        fraud_reason="Transaction appears legitimate",
        fraud_risk_score=0.15,
        source_account_valid=True,
        destination_account_valid=True,
        sufficient_balance=True,
        processing_time_ms=100,
        audited_at=NOON,
    )
    fields.update(overrides)
    return AuditEntry(**fields)


@pytest.fixture
def seeded(db: Session) -> AuditService:
    """Five entries on 2024-03-15 plus one the day before"""
    repo = AuditRepository(db)
    for entry in [
        _entry(transaction_id="tx-ok-1", processing_time_ms=100),
        _entry(transaction_id="tx-ok-2", processing_time_ms=300, audited_at=NOON + timedelta(hours=1)),
        _entry(
            transaction_id="tx-fraud",
            to_account="ACC003",
            final_status=PaymentStatus.FRAUD_CHECK_FAILED,
            fraud_check_passed=False,
            fraud_reason="High risk score detected: 0.91",
            fraud_risk_score=0.91,
            sufficient_balance=None,
            failure_reason="Fraud detected: High risk score detected: 0.91",
            processing_time_ms=50,
        ),
        _entry(
            transaction_id="tx-invalid",
            from_account="BAD",
            final_status=PaymentStatus.ACCOUNT_VALIDATION_FAILED,
            fraud_check_passed=None,
            fraud_reason=FRAUD_CHECK_NOT_PERFORMED,
            fraud_risk_score=None,
            source_account_valid=False,
            destination_account_valid=None,
            sufficient_balance=None,
            failure_reason="Source account validation failed: Invalid account number",
            processing_time_ms=5,
        ),
        _entry(
            transaction_id="tx-slow",
            from_account="ACC004",
            to_account="ACC005",
            final_status=PaymentStatus.FAILED,
            failure_reason="Payment processing failed: timeout",
            processing_time_ms=6000,
        ),
        _entry(transaction_id="tx-yesterday", audited_at=NOON - timedelta(days=1)),
    ]:
        repo.append(entry)
    db.commit()
    return AuditService(repo, review_risk_score=0.7, slow_processing_ms=5000)


def test_build_audit_entry_from_trail():
    payment = Payment.from_request(
        PaymentRequest(
            from_account="ACC001",
            to_account="ACC001",
            amount=Decimal("500.00"),
            currency="USD",
            payment_type=PaymentType.OTHER,
        )
    )
    transition(payment, PaymentStatus.FRAUD_CHECK_FAILED, "Fraud detected: Same account transfer detected")
    trail = AuditTrail(
        source_account_valid=True,
        destination_account_valid=True,
        fraud_check=FraudCheck(payment.transaction_id, True, "Same account transfer detected", 0.15),
    )

    entry = build_audit_entry(payment, trail, 12)

    assert entry.final_status == PaymentStatus.FRAUD_CHECK_FAILED
    assert entry.fraud_check_passed is False
    assert entry.fraud_reason == "Same account transfer detected"
    assert entry.sufficient_balance is None
    assert entry.payment_initiated_at == payment.created_at
    assert entry.processing_time_ms == 12


def test_build_audit_entry_without_fraud_check():
    payment = Payment.from_request(
        PaymentRequest("BAD", "ACC002", Decimal("1.00"), "USD", PaymentType.OTHER)
    )
    transition(payment, PaymentStatus.ACCOUNT_VALIDATION_FAILED, "Source account validation failed")

    entry = build_audit_entry(payment, AuditTrail(source_account_valid=False), 1)

    assert entry.fraud_check_passed is None
    assert entry.fraud_reason == FRAUD_CHECK_NOT_PERFORMED
    assert entry.fraud_risk_score is None


def test_queries(seeded: AuditService):
    assert [e.transaction_id for e in seeded.by_transaction_id("tx-fraud")] == ["tx-fraud"]
    assert len(seeded.by_account("ACC002")) == 4
    assert len(seeded.by_status(PaymentStatus.COMPLETED)) == 3
    assert [e.transaction_id for e in seeded.by_fraud_outcome(True)] == ["tx-fraud"]
    # Entries with no fraud verdict belong to neither side
    assert len(seeded.by_fraud_outcome(False)) == 4


def test_entries_newest_first(seeded: AuditService):
    entries = seeded.all_entries()

    assert entries[0].transaction_id == "tx-ok-2"
    assert entries[-1].transaction_id == "tx-yesterday"


def test_blank_query_rejected(seeded: AuditService):
    with pytest.raises(InvalidQueryError):
        seeded.by_transaction_id("  ")
    with pytest.raises(InvalidQueryError):
        seeded.by_account("")


def test_time_range(seeded: AuditService):
    entries = seeded.by_time_range(NOON - timedelta(minutes=1), NOON + timedelta(minutes=1))
    assert {e.transaction_id for e in entries} == {"tx-ok-1", "tx-fraud", "tx-invalid", "tx-slow"}

    with pytest.raises(InvalidQueryError):
        seeded.by_time_range(NOON, NOON - timedelta(seconds=1))


def test_processing_time_only_counts_completed(seeded: AuditService):
    # tx-ok-1, tx-ok-2, tx-yesterday
    assert seeded.average_processing_time_ms() == pytest.approx(500 / 3)
    assert seeded.max_processing_time_ms() == 300


def test_empty_trail_analytics(db: Session):
    service = AuditService(AuditRepository(db))

    assert service.average_processing_time_ms() == 0.0
    assert service.max_processing_time_ms() == 0
    assert service.fraud_detection_rate() == 0.0
    assert service.analytics().total_audited == 0


def test_fraud_detection_rate_is_fraction(seeded: AuditService):
    assert seeded.fraud_detection_rate() == pytest.approx(1 / 6)


def test_high_risk_flags(seeded: AuditService):
    flagged = {e.transaction_id for e in seeded.high_risk_entries()}

    assert flagged == {"tx-fraud", "tx-slow"}
    assert seeded.is_high_risk(_entry(fraud_risk_score=0.75)) is True
    assert seeded.is_high_risk(_entry(fraud_risk_score=0.70)) is False


def test_analytics_summary(seeded: AuditService):
    summary = seeded.analytics()

    assert summary.total_audited == 6
    assert summary.max_processing_time_ms == 300
    assert summary.high_risk_count == 2
    assert summary.fraud_detection_rate == pytest.approx(1 / 6)


def test_account_analytics(seeded: AuditService):
    result = seeded.account_analytics("ACC001")

    assert result.total_transactions == 4
    assert result.status_breakdown == {"COMPLETED": 3, "FRAUD_CHECK_FAILED": 1}
    assert result.fraud_detected_count == 1
    assert result.fraud_rate == pytest.approx(0.25)
    assert result.max_processing_time_ms == 300
    assert result.source_validation_failures == 0


def test_daily_summary(seeded: AuditService):
    summary = seeded.daily_summary(date(2024, 3, 15))

    assert summary.day == "2024-03-15"
    assert summary.total_transactions == 5
    assert summary.successful_transactions == 2
    assert summary.failed_transactions == 3
    assert summary.success_rate == pytest.approx(0.4)
    assert summary.fraud_detected_count == 1
    assert summary.failure_reasons["Payment processing failed: timeout"] == 1


def test_daily_summary_for_quiet_day(seeded: AuditService):
    summary = seeded.daily_summary(date(2024, 1, 1))

    assert summary.total_transactions == 0
    assert summary.success_rate == 0.0
