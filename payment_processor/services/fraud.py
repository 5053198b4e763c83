"""In-process Fraud Screener with a swappable risk scorer"""

import logging
from decimal import Decimal

from payment_processor.domain.fraud import (
    DeterministicRiskScorer,
    RandomRiskScorer,
    RiskScorer,
    evaluate_fraud,
)
from payment_processor.domain.models import FraudCheck, FraudCheckRequest


class FraudService:
    """
    Mock fraud screener.

    The risk score comes from a pluggable scorer; the verdict comes from the
    fixed rule set in domain.fraud. Deterministic mode swaps in fixed scores
    so test runs are reproducible.
    """

    def __init__(
        self,
        scorer: RiskScorer | None = None,
        deterministic: bool = False,
        high_amount_threshold: Decimal = Decimal("10000"),
        suspicious_amount_threshold: Decimal = Decimal("50000"),
        high_risk_score: float = 0.80,
    ):
        self.high_amount_threshold = high_amount_threshold
        self.suspicious_amount_threshold = suspicious_amount_threshold
        self.high_risk_score = high_risk_score
        self._custom_scorer = scorer
        self.scorer: RiskScorer = scorer or RandomRiskScorer(
            high_amount_threshold=high_amount_threshold,
            suspicious_amount_threshold=suspicious_amount_threshold,
        )
        if deterministic:
            self.set_deterministic_mode(True)

    def set_deterministic_mode(self, enabled: bool) -> None:
        if enabled:
            self.scorer = DeterministicRiskScorer(
                high_amount_threshold=self.high_amount_threshold,
                suspicious_amount_threshold=self.suspicious_amount_threshold,
            )
        else:
            self.scorer = self._custom_scorer or RandomRiskScorer(
                high_amount_threshold=self.high_amount_threshold,
                suspicious_amount_threshold=self.suspicious_amount_threshold,
            )
        logging.info("Fraud service deterministic mode changed", extra={"enabled": enabled})

    async def check_fraud(self, request: FraudCheckRequest) -> FraudCheck:
        logging.info("Performing fraud check", extra={"transaction_id": request.transaction_id})

        risk_score = self.scorer.score(request.amount)
        fraudulent, reason = evaluate_fraud(
            request,
            risk_score,
            suspicious_amount_threshold=self.suspicious_amount_threshold,
            high_risk_score=self.high_risk_score,
        )

        if fraudulent:
            logging.warning(
                "Fraud detected",
                extra={"transaction_id": request.transaction_id, "reason": reason, "risk_score": risk_score},
            )

        return FraudCheck(
            transaction_id=request.transaction_id,
            fraudulent=fraudulent,
            reason=reason,
            risk_score=risk_score,
        )
