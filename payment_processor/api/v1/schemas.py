"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from payment_processor.domain.models import PaymentStatus, PaymentType


class PaymentRequestSchema(BaseModel):
    """Request body for POST /v1/payments"""

    from_account: str = Field(..., min_length=1, description="Source account identifier")
    to_account: str = Field(..., min_length=1, description="Destination account identifier")
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Amount to transfer")
    currency: str = Field(..., min_length=3, max_length=3, description="ISO currency code")
    payment_type: PaymentType
    description: Optional[str] = None


class PaymentResponse(BaseModel):
    """Outcome of a payment, for POST /v1/payments and GET /v1/payments/{transaction_id}"""

    model_config = ConfigDict(from_attributes=True)

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


class PaymentSchema(BaseModel):
    """Stored payment record"""

    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    from_account: str
    to_account: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    description: Optional[str] = None
    status: PaymentStatus
    failure_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AuditEntrySchema(BaseModel):
    """Single audit entry"""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    transaction_id: str
    from_account: str
    to_account: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    description: Optional[str] = None
    payment_initiated_at: Optional[datetime] = None
    fraud_check_passed: Optional[bool] = None
    fraud_reason: Optional[str] = None
    fraud_risk_score: Optional[float] = None
    fraud_checked_at: Optional[datetime] = None
    source_account_valid: Optional[bool] = None
    destination_account_valid: Optional[bool] = None
    sufficient_balance: Optional[bool] = None
    final_status: PaymentStatus
    failure_reason: Optional[str] = None
    processing_time_ms: Optional[int] = None
    audited_at: datetime


class AuditAnalyticsSchema(BaseModel):
    """Response for GET /v1/audit/analytics"""

    model_config = ConfigDict(from_attributes=True)

    total_audited: int
    average_processing_time_ms: float
    max_processing_time_ms: int
    fraud_detection_rate: float
    high_risk_count: int


class AccountAuditAnalyticsSchema(BaseModel):
    """Response for GET /v1/audit/accounts/{account_number}"""

    model_config = ConfigDict(from_attributes=True)

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


class DailyAuditSummarySchema(BaseModel):
    """Response for GET /v1/audit/daily/{day}"""

    model_config = ConfigDict(from_attributes=True)

    day: str
    total_transactions: int
    successful_transactions: int
    failed_transactions: int
    success_rate: float
    fraud_detected_count: int
    average_processing_time_ms: float
    failure_reasons: Dict[str, int]


class AuditListResponse(BaseModel):
    """Filtered audit entries"""

    count: int
    entries: List[AuditEntrySchema]
