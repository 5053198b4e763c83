"""Data access layer for payments and audit entries"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from payment_processor.domain.models import AuditEntry, Payment, PaymentStatus, PaymentType
from payment_processor.infrastructure.database.models import PaymentAuditRecord, PaymentRecord


def _to_payment(record: PaymentRecord) -> Payment:
    return Payment(
        transaction_id=record.transaction_id,
        from_account=record.from_account,
        to_account=record.to_account,
        amount=record.amount,
        currency=record.currency,
        payment_type=PaymentType(record.payment_type),
        description=record.description,
        status=PaymentStatus(record.status),
        failure_reason=record.failure_reason,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _to_audit_entry(record: PaymentAuditRecord) -> AuditEntry:
    return AuditEntry(
        id=record.id,
        transaction_id=record.transaction_id,
        from_account=record.from_account,
        to_account=record.to_account,
        amount=record.amount,
        currency=record.currency,
        payment_type=PaymentType(record.payment_type),
        description=record.description,
        payment_initiated_at=record.payment_initiated_at,
        fraud_check_passed=record.fraud_check_passed,
        fraud_reason=record.fraud_reason,
        fraud_risk_score=record.fraud_risk_score,
        fraud_checked_at=record.fraud_checked_at,
        source_account_valid=record.source_account_valid,
        destination_account_valid=record.destination_account_valid,
        sufficient_balance=record.sufficient_balance,
        final_status=PaymentStatus(record.final_status),
        failure_reason=record.failure_reason,
        processing_time_ms=record.processing_time_ms,
        audited_at=record.audited_at,
    )


class PaymentRepository:
    """Repository for payment records keyed by transaction id"""

    def __init__(self, db: Session):
        self.db = db

    def save(self, payment: Payment) -> None:
        """Insert or update the record for payment.transaction_id (flush, no commit)"""
        record = (
            self.db.query(PaymentRecord)
            .filter(PaymentRecord.transaction_id == payment.transaction_id)
            .first()
        )
        if record is None:
            record = PaymentRecord(transaction_id=payment.transaction_id, created_at=payment.created_at)
            self.db.add(record)

        record.from_account = payment.from_account
        record.to_account = payment.to_account
        record.amount = payment.amount
        record.currency = payment.currency
        record.payment_type = payment.payment_type.value
        record.description = payment.description
        record.status = payment.status.value
        record.failure_reason = payment.failure_reason
        record.updated_at = payment.updated_at
        self.db.flush()

    def get_by_transaction_id(self, transaction_id: str) -> Optional[Payment]:
        record = (
            self.db.query(PaymentRecord)
            .filter(PaymentRecord.transaction_id == transaction_id)
            .first()
        )
        return _to_payment(record) if record else None

    def list_by_account(self, account_number: str) -> List[Payment]:
        """Payments where the account is sender or receiver"""
        records = (
            self.db.query(PaymentRecord)
            .filter(
                or_(
                    PaymentRecord.from_account == account_number,
                    PaymentRecord.to_account == account_number,
                )
            )
            .all()
        )
        return [_to_payment(r) for r in records]

    def list_by_status(self, status: PaymentStatus) -> List[Payment]:
        records = self.db.query(PaymentRecord).filter(PaymentRecord.status == status.value).all()
        return [_to_payment(r) for r in records]

    def list_all(self) -> List[Payment]:
        return [_to_payment(r) for r in self.db.query(PaymentRecord).all()]


class AuditRepository:
    """Append-only repository for audit entries"""

    def __init__(self, db: Session):
        self.db = db

    def append(self, entry: AuditEntry) -> None:
        """Add a new audit row (flush, no commit); rows are never updated"""
        self.db.add(
            PaymentAuditRecord(
                transaction_id=entry.transaction_id,
                from_account=entry.from_account,
                to_account=entry.to_account,
                amount=entry.amount,
                currency=entry.currency,
                payment_type=entry.payment_type.value,
                description=entry.description,
                payment_initiated_at=entry.payment_initiated_at,
                fraud_check_passed=entry.fraud_check_passed,
                fraud_reason=entry.fraud_reason,
                fraud_risk_score=entry.fraud_risk_score,
                fraud_checked_at=entry.fraud_checked_at,
                source_account_valid=entry.source_account_valid,
                destination_account_valid=entry.destination_account_valid,
                sufficient_balance=entry.sufficient_balance,
                final_status=entry.final_status.value,
                failure_reason=entry.failure_reason,
                processing_time_ms=entry.processing_time_ms,
                audited_at=entry.audited_at,
            )
        )
        self.db.flush()

    def find_by_transaction_id(self, transaction_id: str) -> List[AuditEntry]:
        records = (
            self.db.query(PaymentAuditRecord)
            .filter(PaymentAuditRecord.transaction_id == transaction_id)
            .order_by(PaymentAuditRecord.audited_at.desc())
            .all()
        )
        return [_to_audit_entry(r) for r in records]

    def find_by_account(self, account_number: str) -> List[AuditEntry]:
        records = (
            self.db.query(PaymentAuditRecord)
            .filter(
                or_(
                    PaymentAuditRecord.from_account == account_number,
                    PaymentAuditRecord.to_account == account_number,
                )
            )
            .order_by(PaymentAuditRecord.audited_at.desc())
            .all()
        )
        return [_to_audit_entry(r) for r in records]

    def find_by_status(self, status: PaymentStatus) -> List[AuditEntry]:
        records = (
            self.db.query(PaymentAuditRecord)
            .filter(PaymentAuditRecord.final_status == status.value)
            .order_by(PaymentAuditRecord.audited_at.desc())
            .all()
        )
        return [_to_audit_entry(r) for r in records]

    def find_by_fraud_check_passed(self, passed: bool) -> List[AuditEntry]:
        records = (
            self.db.query(PaymentAuditRecord)
            .filter(PaymentAuditRecord.fraud_check_passed == passed)
            .order_by(PaymentAuditRecord.audited_at.desc())
            .all()
        )
        return [_to_audit_entry(r) for r in records]

    def find_between(self, start: datetime, end: datetime) -> List[AuditEntry]:
        """Entries audited in [start, end]"""
        records = (
            self.db.query(PaymentAuditRecord)
            .filter(PaymentAuditRecord.audited_at.between(start, end))
            .order_by(PaymentAuditRecord.audited_at.desc())
            .all()
        )
        return [_to_audit_entry(r) for r in records]

    def find_all(self) -> List[AuditEntry]:
        records = self.db.query(PaymentAuditRecord).order_by(PaymentAuditRecord.audited_at.desc()).all()
        return [_to_audit_entry(r) for r in records]
