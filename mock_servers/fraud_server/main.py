from decimal import Decimal

from fastapi import FastAPI
from pydantic import BaseModel

from payment_processor.domain.fraud import DeterministicRiskScorer, evaluate_fraud
from payment_processor.domain.models import FraudCheckRequest

app = FastAPI(title="Mock Fraud Server", version="1.0.0")
scorer = DeterministicRiskScorer()


class FraudCheckBody(BaseModel):
    transaction_id: str
    from_account: str
    to_account: str
    amount: Decimal
    currency: str


@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/fraud/check")
def check_fraud(body: FraudCheckBody):
    request = FraudCheckRequest(**body.model_dump())
    risk_score = scorer.score(request.amount)
    fraudulent, reason = evaluate_fraud(request, risk_score)
    return {
        "transaction_id": request.transaction_id,
        "fraudulent": fraudulent,
        "reason": reason,
        "risk_score": risk_score,
    }
