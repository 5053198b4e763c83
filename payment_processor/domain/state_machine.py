"""Payment lifecycle transitions enforced by the orchestrator"""

from typing import Dict, Optional, Set

from payment_processor.domain.exceptions import InvalidStatusTransitionError
from payment_processor.domain.models import Payment, PaymentStatus
from payment_processor.utils.date_utils import utcnow

ALLOWED_TRANSITIONS: Dict[PaymentStatus, Set[PaymentStatus]] = {
    PaymentStatus.PENDING: {
        PaymentStatus.ACCOUNT_VALIDATION_FAILED,
        PaymentStatus.FRAUD_CHECK_FAILED,
        PaymentStatus.INSUFFICIENT_BALANCE,
        PaymentStatus.PROCESSING,
        PaymentStatus.FAILED,
    },
    PaymentStatus.PROCESSING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.ACCOUNT_VALIDATION_FAILED: set(),
    PaymentStatus.FRAUD_CHECK_FAILED: set(),
    PaymentStatus.INSUFFICIENT_BALANCE: set(),
    PaymentStatus.COMPLETED: set(),
    PaymentStatus.FAILED: set(),
}

FAILURE_STATUSES = frozenset(
    {
        PaymentStatus.ACCOUNT_VALIDATION_FAILED,
        PaymentStatus.FRAUD_CHECK_FAILED,
        PaymentStatus.INSUFFICIENT_BALANCE,
        PaymentStatus.FAILED,
    }
)

TERMINAL_STATUSES = FAILURE_STATUSES | {PaymentStatus.COMPLETED}


def is_terminal(status: PaymentStatus) -> bool:
    return status in TERMINAL_STATUSES


def is_failure(status: PaymentStatus) -> bool:
    return status in FAILURE_STATUSES


def validate_transition(current: PaymentStatus, new: PaymentStatus) -> None:
    """Raise when a transition is not allowed by the lifecycle"""
    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidStatusTransitionError(current.value, new.value)


def transition(payment: Payment, new_status: PaymentStatus, failure_reason: Optional[str] = None) -> Payment:
    """
    Move a payment forward in its lifecycle.

    failure_reason is kept only for failure statuses; updated_at is refreshed
    on every transition.
    """
    validate_transition(payment.status, new_status)
    payment.status = new_status
    payment.failure_reason = failure_reason if is_failure(new_status) else None
    payment.updated_at = utcnow()
    return payment
