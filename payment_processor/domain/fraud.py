"""Fraud scoring rules - risk score bands and the fraud verdict"""

import random
from decimal import Decimal
from typing import Protocol, Tuple

from payment_processor.domain.models import FraudCheckRequest

HIGH_AMOUNT_THRESHOLD = Decimal("10000")
SUSPICIOUS_AMOUNT_THRESHOLD = Decimal("50000")
HIGH_RISK_SCORE = 0.80

LEGITIMATE_REASON = "Transaction appears legitimate"
SAME_ACCOUNT_REASON = "Same account transfer detected"
SUSPICIOUS_AMOUNT_REASON = "Transaction amount exceeds suspicious threshold"


class RiskScorer(Protocol):
    """Produces a 0.0 - 1.0 risk score for an amount"""

    def score(self, amount: Decimal) -> float:
        ...


class RandomRiskScorer:
    """
    Placeholder scorer drawing a random score inside the amount's band.

    Bands:
    - >= suspicious threshold: 0.85 - 1.00
    - >= high threshold:       0.40 - 0.70
    - otherwise:               0.00 - 0.30
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        high_amount_threshold: Decimal = HIGH_AMOUNT_THRESHOLD,
        suspicious_amount_threshold: Decimal = SUSPICIOUS_AMOUNT_THRESHOLD,
    ):
        self.rng = rng or random.Random()
        self.high_amount_threshold = high_amount_threshold
        self.suspicious_amount_threshold = suspicious_amount_threshold

    def score(self, amount: Decimal) -> float:
        if amount >= self.suspicious_amount_threshold:
            return 0.85 + self.rng.random() * 0.15
        if amount >= self.high_amount_threshold:
            return 0.40 + self.rng.random() * 0.30
        return self.rng.random() * 0.30


class DeterministicRiskScorer:
    """Fixed score per amount band, for reproducible runs"""

    def __init__(
        self,
        high_amount_threshold: Decimal = HIGH_AMOUNT_THRESHOLD,
        suspicious_amount_threshold: Decimal = SUSPICIOUS_AMOUNT_THRESHOLD,
    ):
        self.high_amount_threshold = high_amount_threshold
        self.suspicious_amount_threshold = suspicious_amount_threshold

    def score(self, amount: Decimal) -> float:
        if amount >= self.suspicious_amount_threshold:
            return 0.90
        if amount >= self.high_amount_threshold:
            return 0.50
        return 0.15


def evaluate_fraud(
    request: FraudCheckRequest,
    risk_score: float,
    suspicious_amount_threshold: Decimal = SUSPICIOUS_AMOUNT_THRESHOLD,
    high_risk_score: float = HIGH_RISK_SCORE,
) -> Tuple[bool, str]:
    """
    Decide whether a transfer is fraudulent.

    Rules, first match wins:
    1. Same source and destination account
    2. Suspicious amount combined with a high risk score
    3. High risk score alone

    Returns: (fraudulent, reason)
    """
    if request.from_account == request.to_account:
        return True, SAME_ACCOUNT_REASON

    high_risk = risk_score > high_risk_score

    if high_risk and request.amount >= suspicious_amount_threshold:
        return True, SUSPICIOUS_AMOUNT_REASON

    if high_risk:
        return True, f"High risk score detected: {risk_score:.2f}"

    return False, LEGITIMATE_REASON
