"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from fintrack_gateway.config import settings


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


def log_sms_import(
    request_id: str,
    user_id: str,
    total: int,
    imported: int,
    status_counts: Dict[str, int],
    duration_ms: float,
) -> None:
    """Log structured SMS import batch outcome"""
    logging.info(
        "SMS import completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "sms_import_complete",
            "messages": total,
            "imported": imported,
            "outcomes": status_counts,
            "duration_ms": duration_ms,
        },
    )


def log_receipt_scan(request_id: str, user_id: str, files: int, succeeded: int, duration_ms: float) -> None:
    """Log structured receipt scan batch outcome"""
    logging.info(
        "Receipt scan completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "receipt_scan_complete",
            "files": files,
            "succeeded": succeeded,
            "duration_ms": duration_ms,
        },
    )


def log_report(request_id: str, financial_score: int, risk_count: int) -> None:
    logging.info(
        "Financial report generated",
        extra={
            "request_id": request_id,
            "step": "report_generated",
            "financial_score": financial_score,
            "risk_factors": risk_count,
        },
    )
