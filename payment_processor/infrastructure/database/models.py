"""SQLAlchemy ORM models for payments and their audit trail"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, Numeric, String, Text
from sqlalchemy.orm import declarative_base

from payment_processor.utils.date_utils import utcnow

Base = declarative_base()


class PaymentRecord(Base):
    """One transfer attempt, updated in place on every status transition"""

    __tablename__ = "payment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(String(36), nullable=False, unique=True, index=True)
    from_account = Column(String(64), nullable=False, index=True)
    to_account = Column(String(64), nullable=False, index=True)
    amount = Column(Numeric(19, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    payment_type = Column(String(32), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, index=True)
    failure_reason = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)


class PaymentAuditRecord(Base):
    """Append-only snapshot of a terminal payment decision"""

    __tablename__ = "payment_audit"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(String(36), nullable=False, index=True)  # not unique by schema
    from_account = Column(String(64), nullable=False, index=True)
    to_account = Column(String(64), nullable=False, index=True)
    amount = Column(Numeric(19, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    payment_type = Column(String(32), nullable=False)
    description = Column(Text, nullable=True)
    payment_initiated_at = Column(DateTime, nullable=True)

    # Fraud screening
    fraud_check_passed = Column(Boolean, nullable=True)
    fraud_reason = Column(Text, nullable=True)
    fraud_risk_score = Column(Float, nullable=True)
    fraud_checked_at = Column(DateTime, nullable=True)

    # Account validation
    source_account_valid = Column(Boolean, nullable=True)
    destination_account_valid = Column(Boolean, nullable=True)
    sufficient_balance = Column(Boolean, nullable=True)

    # Outcome
    final_status = Column(String(32), nullable=False, index=True)
    failure_reason = Column(Text, nullable=True)
    processing_time_ms = Column(Integer, nullable=True)
    audited_at = Column(DateTime, nullable=False, default=utcnow, index=True)
