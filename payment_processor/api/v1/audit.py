"""GET /v1/audit - audit trail queries and analytics"""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from payment_processor.api.dependencies import get_audit_service
from payment_processor.api.v1.schemas import (
    AccountAuditAnalyticsSchema,
    AuditAnalyticsSchema,
    AuditEntrySchema,
    AuditListResponse,
    DailyAuditSummarySchema,
)
from payment_processor.domain.exceptions import InvalidQueryError
from payment_processor.domain.models import PaymentStatus
from payment_processor.services.audit import AuditService

router = APIRouter()


def _entries(entries) -> List[AuditEntrySchema]:
    return [AuditEntrySchema.model_validate(e) for e in entries]


@router.get("/audit", response_model=AuditListResponse)
def search_audit_entries(
    account: Optional[str] = Query(None, description="Sender or receiver account"),
    status: Optional[PaymentStatus] = Query(None, description="Final payment status"),
    fraudulent: Optional[bool] = Query(None, description="Fraud check outcome"),
    start: Optional[datetime] = Query(None, description="Audited at or after (UTC)"),
    end: Optional[datetime] = Query(None, description="Audited at or before (UTC)"),
    audit: AuditService = Depends(get_audit_service),
):
    """Audit entries matching every filter given"""
    if (start is None) != (end is None):
        raise HTTPException(status_code=422, detail="start and end must be given together")

    try:
        if start is not None:
            entries = audit.by_time_range(start, end)
        elif account is not None:
            entries = audit.by_account(account)
        elif status is not None:
            entries = audit.by_status(status)
        elif fraudulent is not None:
            entries = audit.by_fraud_outcome(fraudulent)
        else:
            entries = audit.all_entries()
    except InvalidQueryError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if account is not None:
        entries = [e for e in entries if account in (e.from_account, e.to_account)]
    if status is not None:
        entries = [e for e in entries if e.final_status == status]
    if fraudulent is not None:
        entries = [e for e in entries if e.fraud_check_passed is (not fraudulent)]

    return AuditListResponse(count=len(entries), entries=_entries(entries))


@router.get("/audit/analytics", response_model=AuditAnalyticsSchema)
def get_audit_analytics(audit: AuditService = Depends(get_audit_service)):
    """Processing time, fraud detection rate and high-risk count"""
    return AuditAnalyticsSchema.model_validate(audit.analytics())


@router.get("/audit/high-risk", response_model=AuditListResponse)
def get_high_risk_entries(audit: AuditService = Depends(get_audit_service)):
    """Entries flagged for manual review"""
    entries = audit.high_risk_entries()
    return AuditListResponse(count=len(entries), entries=_entries(entries))


@router.get("/audit/accounts/{account_number}", response_model=AccountAuditAnalyticsSchema)
def get_account_analytics(account_number: str, audit: AuditService = Depends(get_audit_service)):
    return AccountAuditAnalyticsSchema.model_validate(audit.account_analytics(account_number))


@router.get("/audit/daily/{day}", response_model=DailyAuditSummarySchema)
def get_daily_summary(day: date, audit: AuditService = Depends(get_audit_service)):
    return DailyAuditSummarySchema.model_validate(audit.daily_summary(day))


@router.get("/audit/{transaction_id}", response_model=List[AuditEntrySchema])
def get_audit_for_transaction(transaction_id: str, audit: AuditService = Depends(get_audit_service)):
    """Audit entries recorded for one transaction"""
    entries = audit.by_transaction_id(transaction_id)
    if not entries:
        raise HTTPException(status_code=404, detail="No audit entries for transaction")
    return _entries(entries)
