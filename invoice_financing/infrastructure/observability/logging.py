"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from invoice_financing.config import settings
from invoice_financing.domain.models import FinancingOutcome, FinancingRunSummary


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_financing_outcome(invoice_id: Optional[int], outcome: FinancingOutcome) -> None:
    """Log one invoice evaluation; failures at INFO, successes at DEBUG"""
    extra: Dict[str, Any] = {
        "invoice_id": invoice_id,
        "step": "invoice_evaluated",
        "outcome": outcome.status.value,
        "term_days": outcome.term_days,
    }
    if outcome.offer is not None:
        extra["financier"] = outcome.offer.financier.name
        extra["rate_bps"] = outcome.offer.rate_bps

    if outcome.financed:
        extra["early_payment_value_cents"] = outcome.early_payment_value_cents
        logging.debug("Invoice financed", extra=extra)
    else:
        logging.info("Financing failed", extra=extra)


def log_financing_run(summary: FinancingRunSummary, duration_ms: float) -> None:
    """Log structured run summary for analysis"""
    logging.info(
        "Financing completed",
        extra={
            "step": "financing_complete",
            "financing_date": summary.financing_date.isoformat(),
            "pages": summary.pages,
            "processed": summary.processed,
            "outcomes": {status.value: count for status, count in summary.outcomes.items()},
            "financed_value_cents": summary.financed_value_cents,
            "early_payment_value_cents": summary.early_payment_value_cents,
            "duration_ms": duration_ms,
        },
    )
