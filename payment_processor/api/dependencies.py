"""Dependency injection for FastAPI endpoints"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from payment_processor.config import settings
from payment_processor.infrastructure.accounts.store import InMemoryAccountStore
from payment_processor.infrastructure.clients.fraud import FraudClient
from payment_processor.infrastructure.database.repositories import AuditRepository, PaymentRepository
from payment_processor.infrastructure.database.session import get_db
from payment_processor.services.accounts import AccountService
from payment_processor.services.audit import AuditService
from payment_processor.services.fraud import FraudService
from payment_processor.services.orchestrator import FraudScreener, PaymentOrchestrator


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


@lru_cache
def get_account_store() -> InMemoryAccountStore:
    """Process-wide mock ledger; balances live as long as the app"""
    return InMemoryAccountStore(auto_open=settings.auto_open_pattern_accounts)


@lru_cache
def get_fraud_screener() -> FraudScreener:
    """Remote screener when configured, otherwise the in-process mock"""
    if settings.fraud_service_url:
        return FraudClient()
    return FraudService(
        deterministic=settings.fraud_deterministic_mode,
        high_amount_threshold=settings.fraud_high_amount_threshold,
        suspicious_amount_threshold=settings.fraud_suspicious_amount_threshold,
        high_risk_score=settings.fraud_high_risk_score,
    )


def get_account_service(store: InMemoryAccountStore = Depends(get_account_store)) -> AccountService:
    return AccountService(store)


def get_audit_service(db: Session = Depends(get_db)) -> AuditService:
    return AuditService(AuditRepository(db))


def get_orchestrator(
    request: Request,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
    fraud: FraudScreener = Depends(get_fraud_screener),
    audit: AuditService = Depends(get_audit_service),
) -> PaymentOrchestrator:
    """Provide an orchestrator bound to this request's session"""
    return PaymentOrchestrator(
        db=db,
        accounts=accounts,
        fraud=fraud,
        audit=audit,
        payments=PaymentRepository(db),
        request_id=get_request_id(request),
    )
