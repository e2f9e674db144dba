"""JSON structured logging for ticket metrics.

Usage:
    from ticket_metrics.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Metrics stored", extra={"project_id": "PROJ-1"})
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from pythonjsonlogger import jsonlogger


class MetricsJsonFormatter(jsonlogger.JsonFormatter):
    """Adds ``timestamp``, ``environment`` and ``request_id`` to every record."""

    def __init__(self, *args: Any, environment: str = "production", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.environment = environment

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        if hasattr(record, "request_id"):
            log_record["request_id"] = record.request_id
        log_record["environment"] = self.environment


def setup_logging(level: str = "INFO", environment: str = "production") -> None:
    root_logger = logging.getLogger()
    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(
        MetricsJsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
            environment=environment,
        )
    )
    root_logger.addHandler(handler)

    # botocore logs every retry and credential lookup at INFO/DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class RequestLoggerAdapter(logging.LoggerAdapter):
    """Merges per-call ``extra`` with the adapter context instead of replacing it."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_request_logger(name: str, request_id: str | None = None) -> logging.Logger | logging.LoggerAdapter:
    logger = get_logger(name)
    if request_id:
        return RequestLoggerAdapter(logger, {"request_id": request_id})
    return logger


@contextmanager
def log_latency(logger: logging.Logger | logging.LoggerAdapter, operation: str, **extra_context: Any) -> Iterator[None]:
    """Log ``<operation> completed`` with ``latency_ms``, or ``<operation> failed`` if the block raises."""
    start = time.perf_counter()
    try:
        yield
    except Exception:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.warning(
            f"{operation} failed",
            extra={"operation": operation, "outcome": "error", "latency_ms": round(latency_ms, 2), **extra_context},
        )
        raise
    latency_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"{operation} completed",
        extra={"operation": operation, "outcome": "success", "latency_ms": round(latency_ms, 2), **extra_context},
    )
