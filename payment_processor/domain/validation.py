"""Structural validation of inbound payment requests"""

import re
from decimal import Decimal, InvalidOperation
from typing import Iterable

from payment_processor.domain.exceptions import InvalidPaymentRequestError
from payment_processor.domain.models import PaymentRequest, PaymentType

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")
# Matches the Numeric(19, 2) amount columns
AMOUNT_DECIMAL_PLACES = 2


def validate_payment_request(request: PaymentRequest, supported_currencies: Iterable[str]) -> None:
    """
    Reject malformed requests before any payment record exists.

    Requirements:
    - Both accounts present and non-blank
    - Amount is a positive, finite decimal with at most two decimal places
    - Currency is an ISO-style code from the supported set
    - Payment type is one of the known categories

    Raises:
        InvalidPaymentRequestError: listing every violation found
    """
    errors = []

    if not request.from_account or not request.from_account.strip():
        errors.append("from_account is required")
    if not request.to_account or not request.to_account.strip():
        errors.append("to_account is required")

    try:
        amount = Decimal(str(request.amount))
        if not amount.is_finite() or amount <= 0:
            errors.append("amount must be positive")
        elif amount.as_tuple().exponent < -AMOUNT_DECIMAL_PLACES:
            errors.append(f"amount must have at most {AMOUNT_DECIMAL_PLACES} decimal places")
    except (InvalidOperation, TypeError, ValueError):
        errors.append("amount must be a decimal number")

    currency = request.currency or ""
    if not CURRENCY_PATTERN.match(currency):
        errors.append("currency must be a three-letter ISO code")
    elif currency not in set(supported_currencies):
        errors.append(f"currency {currency} is not supported")

    try:
        PaymentType(request.payment_type)
    except ValueError:
        errors.append(f"unknown payment type: {request.payment_type}")

    if errors:
        raise InvalidPaymentRequestError("; ".join(errors))
