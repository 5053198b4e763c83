"""POST /v1/payments - submit a transfer; GET endpoints for payment records"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from payment_processor.api.dependencies import get_orchestrator, get_request_id
from payment_processor.api.v1.schemas import PaymentRequestSchema, PaymentResponse, PaymentSchema
from payment_processor.domain.exceptions import InvalidPaymentRequestError, PaymentStoreError
from payment_processor.domain.models import PaymentRequest, PaymentStatus
from payment_processor.services.orchestrator import PaymentOrchestrator

router = APIRouter()


@router.post("/payments", response_model=PaymentResponse)
async def submit_payment(
    request_body: PaymentRequestSchema,
    request: Request,
    response: Response,
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
):
    """
    Process a money transfer.

    Flow:
    1. Validate both accounts
    2. Screen for fraud
    3. Check source balance
    4. Move funds and complete

    Returns 200 when the payment completed, 400 with the same body for any
    business-rule or processing failure.
    """
    request_id = get_request_id(request)

    try:
        result = await orchestrator.process(PaymentRequest(**request_body.model_dump()))

    except InvalidPaymentRequestError as e:
        logging.warning(f"Invalid payment request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except PaymentStoreError as e:
        logging.error(f"Payment store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Payment store unavailable")

    except Exception as e:
        orchestrator.db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    if not result.successful:
        response.status_code = 400

    return PaymentResponse.model_validate(result)


@router.get("/payments/account/{account_number}", response_model=List[PaymentSchema])
def list_payments_by_account(
    account_number: str,
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
):
    """Payments where the account is sender or receiver (order not guaranteed)"""
    return [PaymentSchema.model_validate(p) for p in orchestrator.list_by_account(account_number)]


@router.get("/payments/{transaction_id}", response_model=PaymentResponse)
def get_payment(
    transaction_id: str,
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
):
    """Current status of a payment"""
    result = orchestrator.get_status(transaction_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return PaymentResponse.model_validate(result)


@router.get("/payments", response_model=List[PaymentSchema])
def list_payments(
    status: Optional[PaymentStatus] = Query(None, description="Only payments currently in this status"),
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
):
    """All payments, optionally filtered by status (order not guaranteed)"""
    payments = orchestrator.list_all() if status is None else orchestrator.list_by_status(status)
    return [PaymentSchema.model_validate(p) for p in payments]
