"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input was rejected before any state was touched"""

    pass


class InvalidPaymentRequestError(ValidationError):
    """Payment request is malformed; no payment record is created"""

    pass


class InvalidQueryError(ValidationError):
    """Audit or payment query parameters are inconsistent"""

    pass


class InvalidStatusTransitionError(DomainException):
    """Payment status change not permitted by the lifecycle"""

    def __init__(self, current: str, new: str):
        super().__init__(f"Invalid status transition: {current} -> {new}")
        self.current = current
        self.new = new


class CollaboratorError(DomainException):
    """Account or fraud collaborator failed to answer"""

    pass


class AccountServiceError(CollaboratorError):
    """Account ledger is unavailable or returned garbage"""

    pass


class InsufficientFundsError(CollaboratorError):
    """Funds were no longer available when the transfer was applied"""

    pass


class FraudServiceError(CollaboratorError):
    """Fraud screener is unavailable or returned garbage"""

    pass


class PaymentStoreError(DomainException):
    """Payment record could not be written"""

    pass
