"""Pytest fixtures for testing"""

import os

# Keep the app's default engine off Postgres while tests import it
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from payment_processor.api.main import create_app
from payment_processor.api.dependencies import get_account_store, get_fraud_screener
from payment_processor.domain.models import PaymentRequest, PaymentType
from payment_processor.infrastructure.accounts.store import InMemoryAccountStore
from payment_processor.infrastructure.database.models import Base
from payment_processor.infrastructure.database.repositories import AuditRepository, PaymentRepository
from payment_processor.infrastructure.database.session import get_db
from payment_processor.services.accounts import AccountService
from payment_processor.services.audit import AuditService
from payment_processor.services.fraud import FraudService
from payment_processor.services.orchestrator import PaymentOrchestrator


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def account_store() -> InMemoryAccountStore:
    """Seeded ledger; ACCnnn accounts open with a fixed 10,000.00"""
    return InMemoryAccountStore(opening_balance=lambda: Decimal("10000.00"))


@pytest.fixture
def fraud_service() -> FraudService:
    """Fraud screener with fixed scores (0.15 / 0.50 / 0.90)"""
    return FraudService(deterministic=True)


@pytest.fixture
def audit_service(db: Session) -> AuditService:
    return AuditService(AuditRepository(db))


@pytest.fixture
def orchestrator(
    db: Session,
    account_store: InMemoryAccountStore,
    fraud_service: FraudService,
    audit_service: AuditService,
) -> PaymentOrchestrator:
    return PaymentOrchestrator(
        db=db,
        accounts=AccountService(account_store),
        fraud=fraud_service,
        audit=audit_service,
        payments=PaymentRepository(db),
    )


@pytest.fixture
def client(db: Session, account_store: InMemoryAccountStore, fraud_service: FraudService) -> TestClient:
    """Create FastAPI test client with test database and mock collaborators"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_account_store] = lambda: account_store
    app.dependency_overrides[get_fraud_screener] = lambda: fraud_service
    return TestClient(app)


@pytest.fixture
def make_request():
    """Build a PaymentRequest with sensible defaults"""

    def _make(
        from_account: str = "ACC001",
        to_account: str = "ACC002",
        amount: str = "1000.00",
        currency: str = "USD",
        payment_type: PaymentType = PaymentType.DOMESTIC_TRANSFER,
        description: str | None = "Test transfer",
    ) -> PaymentRequest:
        return PaymentRequest(
            from_account=from_account,
            to_account=to_account,
            amount=Decimal(amount),
            currency=currency,
            payment_type=payment_type,
            description=description,
        )

    return _make
