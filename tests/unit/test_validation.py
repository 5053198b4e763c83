"""Unit tests for payment request validation"""

import pytest
from decimal import Decimal
from payment_processor.domain.exceptions import InvalidPaymentRequestError
from payment_processor.domain.models import PaymentRequest, PaymentType
from payment_processor.domain.validation import validate_payment_request

SUPPORTED = ["USD", "EUR", "GBP"]


def _request(**overrides) -> PaymentRequest:
    fields = dict(
        from_account="ACC001",
        to_account="ACC002",
        amount=Decimal("100.00"),
        currency="USD",
        payment_type=PaymentType.DOMESTIC_TRANSFER,
    )
    fields.update(overrides)
    return PaymentRequest(**fields)


def test_valid_request_passes():
    validate_payment_request(_request(), SUPPORTED)


def test_same_account_is_structurally_valid():
    """Same-account transfers are the fraud screener's call, not a validation error"""
    validate_payment_request(_request(to_account="ACC001"), SUPPORTED)


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5.00"), Decimal("NaN"), Decimal("Infinity")])
def test_non_positive_or_non_finite_amount_rejected(amount):
    with pytest.raises(InvalidPaymentRequestError, match="amount"):
        validate_payment_request(_request(amount=amount), SUPPORTED)


def test_non_numeric_amount_rejected():
    with pytest.raises(InvalidPaymentRequestError, match="decimal"):
        validate_payment_request(_request(amount="lots"), SUPPORTED)


@pytest.mark.parametrize("account_field", ["from_account", "to_account"])
def test_blank_account_rejected(account_field):
    with pytest.raises(InvalidPaymentRequestError, match=account_field):
        validate_payment_request(_request(**{account_field: "   "}), SUPPORTED)


@pytest.mark.parametrize("currency", ["usd", "US", "USDX", ""])
def test_malformed_currency_rejected(currency):
    with pytest.raises(InvalidPaymentRequestError, match="three-letter"):
        validate_payment_request(_request(currency=currency), SUPPORTED)


def test_unsupported_currency_rejected():
    with pytest.raises(InvalidPaymentRequestError, match="not supported"):
        validate_payment_request(_request(currency="JPY"), SUPPORTED)


def test_unknown_payment_type_rejected():
    with pytest.raises(InvalidPaymentRequestError, match="payment type"):
        validate_payment_request(_request(payment_type="WIRE"), SUPPORTED)


def test_all_violations_reported_together():
    with pytest.raises(InvalidPaymentRequestError) as exc_info:
        validate_payment_request(_request(from_account="", amount=Decimal("-1"), currency="xx"), SUPPORTED)

    message = str(exc_info.value)
    assert "from_account" in message
    assert "amount" in message
    assert "currency" in message


@pytest.mark.parametrize("amount", [Decimal("1000.004"), Decimal("0.001")])
def test_sub_cent_amount_rejected(amount):
    """Amounts are stored with two decimal places; finer values would be rounded"""
    with pytest.raises(InvalidPaymentRequestError, match="decimal places"):
        validate_payment_request(_request(amount=amount), SUPPORTED)


@pytest.mark.parametrize("amount", [Decimal("0.01"), Decimal("1000.5"), Decimal("250")])
def test_amount_within_two_decimal_places_passes(amount):
    validate_payment_request(_request(amount=amount), SUPPORTED)
