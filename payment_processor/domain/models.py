"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from payment_processor.utils.date_utils import utcnow

SUCCESS_MESSAGE = "Payment successful"
FAILURE_MESSAGE = "Payment unsuccessful"
FRAUD_CHECK_NOT_PERFORMED = "Fraud check not performed"


class PaymentStatus(str, Enum):
    """Lifecycle position of a payment"""

    PENDING = "PENDING"
    ACCOUNT_VALIDATION_FAILED = "ACCOUNT_VALIDATION_FAILED"
    FRAUD_CHECK_FAILED = "FRAUD_CHECK_FAILED"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PaymentType(str, Enum):
    """Categorical tag carried through unchanged"""

    DOMESTIC_TRANSFER = "DOMESTIC_TRANSFER"
    INTERBANK_TRANSFER = "INTERBANK_TRANSFER"
    INTRABANK_TRANSFER = "INTRABANK_TRANSFER"
    DOMESTIC_PAYMENT = "DOMESTIC_PAYMENT"
    OTHER = "OTHER"


@dataclass
class PaymentRequest:
    """Inbound transfer request"""

    from_account: str
    to_account: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    description: Optional[str] = None


@dataclass
class Payment:
    """One money-transfer attempt, mutated in place as it moves through the pipeline"""

    transaction_id: str
    from_account: str
    to_account: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    description: Optional[str] = None
    status: PaymentStatus = PaymentStatus.PENDING
    failure_reason: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_request(cls, request: PaymentRequest) -> "Payment":
        now = utcnow()
        return cls(
            transaction_id=str(uuid.uuid4()),
            from_account=request.from_account,
            to_account=request.to_account,
            amount=request.amount,
            currency=request.currency,
            payment_type=request.payment_type,
            description=request.description,
            created_at=now,
            updated_at=now,
        )


@dataclass
class PaymentResult:
    """Outcome reported back to the caller"""

    transaction_id: str
    from_account: str
    to_account: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    status: PaymentStatus
    message: str
    failure_reason: Optional[str] = None
    timestamp: Optional[datetime] = None

    @property
    def successful(self) -> bool:
        return self.status == PaymentStatus.COMPLETED

    @classmethod
    def from_payment(cls, payment: Payment) -> "PaymentResult":
        completed = payment.status == PaymentStatus.COMPLETED
        return cls(
            transaction_id=payment.transaction_id,
            from_account=payment.from_account,
            to_account=payment.to_account,
            amount=payment.amount,
            currency=payment.currency,
            payment_type=payment.payment_type,
            status=payment.status,
            message=SUCCESS_MESSAGE if completed else FAILURE_MESSAGE,
            failure_reason=None if completed else payment.failure_reason,
            timestamp=payment.updated_at,
        )


@dataclass
class AccountValidation:
    """Account Validator answer for a single account"""

    account_number: str
    valid: bool
    message: str
    available_balance: Optional[Decimal] = None


@dataclass
class BalanceCheck:
    """Account Validator answer for a balance sufficiency question"""

    account_number: str
    valid: bool
    sufficient_balance: bool
    message: str
    available_balance: Optional[Decimal] = None


@dataclass
class FraudCheckRequest:
    """Proposed transfer as seen by the Fraud Screener"""

    transaction_id: str
    from_account: str
    to_account: str
    amount: Decimal
    currency: str


@dataclass
class FraudCheck:
    """Fraud Screener verdict"""

    transaction_id: str
    fraudulent: bool
    reason: str
    risk_score: float  # 0.0 - 1.0


@dataclass(frozen=True)
class AuditEntry:
    """Immutable record of one terminal payment decision"""

    transaction_id: str
    from_account: str
    to_account: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    final_status: PaymentStatus
    description: Optional[str] = None
    payment_initiated_at: Optional[datetime] = None
    fraud_check_passed: Optional[bool] = None  # None: screener not reached
    fraud_reason: Optional[str] = None
    fraud_risk_score: Optional[float] = None
    fraud_checked_at: Optional[datetime] = None
    source_account_valid: Optional[bool] = None
    destination_account_valid: Optional[bool] = None
    sufficient_balance: Optional[bool] = None
    failure_reason: Optional[str] = None
    processing_time_ms: Optional[int] = None
    audited_at: datetime = field(default_factory=utcnow)
    id: Optional[int] = None


@dataclass
class AuditAnalytics:
    """Aggregate metrics derived from the audit trail"""

    total_audited: int
    average_processing_time_ms: float
    max_processing_time_ms: int
    fraud_detection_rate: float  # fraction 0.0 - 1.0
    high_risk_count: int


@dataclass
class AccountAuditAnalytics:
    """Audit trail breakdown for one account"""

    account_number: str
    total_transactions: int
    status_breakdown: Dict[str, int]
    fraud_detected_count: int
    fraud_rate: float
    source_validation_failures: int
    destination_validation_failures: int
    insufficient_balance_count: int
    average_processing_time_ms: float
    max_processing_time_ms: int


@dataclass
class DailyAuditSummary:
    """Audit trail summary for one calendar day"""

    day: str
    total_transactions: int
    successful_transactions: int
    failed_transactions: int
    success_rate: float
    fraud_detected_count: int
    average_processing_time_ms: float
    failure_reasons: Dict[str, int]


@dataclass
class AuditTrail:
    """Decision flags gathered while a payment moves through the pipeline"""

    source_account_valid: Optional[bool] = None
    destination_account_valid: Optional[bool] = None
    sufficient_balance: Optional[bool] = None
    fraud_check: Optional[FraudCheck] = None
    fraud_checked_at: Optional[datetime] = None
