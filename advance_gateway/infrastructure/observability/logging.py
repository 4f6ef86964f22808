"""Structured JSON logging for production observability"""

import logging
import sys
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from advance_gateway.utils.date_utils import utcnow

logger = logging.getLogger("advance_gateway")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "advance-gateway", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = utcnow().isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "advance-gateway") -> None:
    """Configure structured JSON logging"""
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers
    root.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def log_transition(
    application_id: str,
    user_id: str,
    action: str,
    from_status: Optional[str],
    to_status: str,
) -> None:
    """Log a lifecycle transition for audit and analysis"""
    logger.info(
        "Application transition",
        extra={
            "application_id": application_id,
            "user_id": user_id,
            "step": "transition",
            "action": action,
            "from_status": from_status,
            "to_status": to_status,
        },
    )


def log_rejected_transition(application_id: str, user_id: str, action: str, current_status: str) -> None:
    """Log a transition refused by its status guard"""
    logger.warning(
        "Application transition refused",
        extra={
            "application_id": application_id,
            "user_id": user_id,
            "step": "transition",
            "action": action,
            "current_status": current_status,
        },
    )
