"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "transfer-gateway", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "transfer-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_transfer(
    request_id: str,
    user_id: Optional[str],
    outcome: str,
    amount: Optional[Decimal],
    duration_ms: float,
    transaction_id: Optional[str] = None,
) -> None:
    """Log structured transfer outcome for analysis"""
    logging.info(
        "Transfer handled",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "transfer_complete",
            "transfer_outcome": outcome,
            "amount": str(amount) if amount is not None else None,
            "transaction_id": transaction_id,
            "duration_ms": duration_ms,
        },
    )
