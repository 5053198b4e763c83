"""Structured JSON logging for production observability"""

import logging
import sys
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from payment_processor.config import settings
from payment_processor.domain.models import Payment
from payment_processor.utils.date_utils import utcnow


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = utcnow().isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_payment_outcome(payment: Payment, duration_ms: float, request_id: Optional[str] = None) -> None:
    """Log structured terminal outcome for analysis"""
    level = logging.INFO if payment.failure_reason is None else logging.WARNING
    logging.log(
        level,
        "Payment finished",
        extra={
            "request_id": request_id,
            "transaction_id": payment.transaction_id,
            "step": "payment_complete",
            "status": payment.status.value,
            "failure_reason": payment.failure_reason,
            "amount": str(payment.amount),
            "currency": payment.currency,
            "duration_ms": duration_ms,
        },
    )
