"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from gym_billing.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_plan_saved(
    request_id: str,
    member_id: str,
    total_amount: Decimal,
    num_installments: int,
    down_payment: Decimal,
) -> None:
    """Log a confirmed installment plan"""
    logging.info(
        "Installment plan saved",
        extra={
            "request_id": request_id,
            "member_id": member_id,
            "step": "plan_saved",
            "total_amount": str(total_amount),
            "num_installments": num_installments,
            "down_payment": str(down_payment),
        },
    )


def log_installment_payment(
    request_id: str,
    member_id: str,
    installment_number: int,
    amount: Decimal,
    adjusted_number: Optional[int],
) -> None:
    """Log a payment applied to an installment and any carry-over adjustment"""
    logging.info(
        "Installment paid",
        extra={
            "request_id": request_id,
            "member_id": member_id,
            "step": "installment_paid",
            "installment_number": installment_number,
            "amount": str(amount),
            "adjusted_installment": adjusted_number,
        },
    )
