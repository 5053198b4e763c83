"""Fraud screening HTTP client for a remote screener"""

import httpx
from payment_processor.domain.models import FraudCheck, FraudCheckRequest
from payment_processor.domain.exceptions import FraudServiceError
from payment_processor.config import settings


class FraudClient:
    """Client for an external fraud screening API speaking the check_fraud contract"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.fraud_service_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def check_fraud(self, request: FraudCheckRequest) -> FraudCheck:
        """
        Ask the remote screener for a verdict.

        Raises:
            FraudServiceError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/fraud/check",
                    json={
                        "transaction_id": request.transaction_id,
                        "from_account": request.from_account,
                        "to_account": request.to_account,
                        "amount": str(request.amount),
                        "currency": request.currency,
                    },
                )
                response.raise_for_status()
                data = response.json()

                risk_score = float(data["risk_score"])
                if not 0.0 <= risk_score <= 1.0:
                    raise ValueError(f"risk_score out of range: {risk_score}")

                return FraudCheck(
                    transaction_id=data.get("transaction_id", request.transaction_id),
                    fraudulent=bool(data["fraudulent"]),
                    reason=data["reason"],
                    risk_score=risk_score,
                )

            except httpx.TimeoutException as e:
                raise FraudServiceError(f"Fraud service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise FraudServiceError(f"Fraud service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise FraudServiceError(f"Fraud service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise FraudServiceError(f"Invalid fraud check data: {e}") from e
