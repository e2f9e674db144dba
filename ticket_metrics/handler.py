"""Event-style entry point: validate, compute, persist, respond."""

from __future__ import annotations

import json
import time
import uuid
from typing import Any, Callable

from .config import Settings
from .exceptions import RequestValidationError
from .logging_config import get_request_logger
from .pipeline import run_metrics_pipeline
from .store import MetricsStoreWriter
from .validation import ensure_valid_request


def generate_request_id() -> str:
    return f"req-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def _response(
    status_code: int,
    body: dict[str, Any],
    request_id: str,
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "X-Request-ID": request_id,
            **(headers or {}),
        },
        "body": json.dumps(body),
    }


def handle_event(event: Any, writer: MetricsStoreWriter, settings: Settings | None = None) -> dict[str, Any]:
    """Process one ``{projectId, tickets}`` event into a ``statusCode``/``headers``/``body`` response.

    Invalid input yields 400 with the list of problems. Any failure after
    validation, store errors included, yields 500; the exception text is only
    exposed when running in the development environment.
    """
    if settings is None:
        settings = Settings.from_env()

    start = time.perf_counter()
    request_id = generate_request_id()
    logger = get_request_logger(__name__, request_id)
    logger.debug("Event received", extra={"event": event})

    try:
        ensure_valid_request(event)

        project_id = event["projectId"]
        tickets = event["tickets"]
        logger.info(f"Processing {len(tickets)} tickets for project {project_id}")

        stored = run_metrics_pipeline(
            project_id,
            tickets,
            writer,
            case_sensitive_status=settings.case_sensitive_status,
        )

        duration_ms = int(round((time.perf_counter() - start) * 1000))
        logger.info(f"Request completed in {duration_ms}ms", extra={"duration_ms": duration_ms})

        return _response(
            200,
            {
                "message": "Analytics processed successfully",
                "data": stored.to_dict(),
                "meta": {"processingTimeMs": duration_ms, "ticketsProcessed": len(tickets)},
            },
            request_id,
            headers={"X-Processing-Time": f"{duration_ms}ms"},
        )
    except RequestValidationError as exc:
        logger.error("Validation failed", extra={"errors": exc.errors})
        return _response(400, {"message": exc.message, "errors": exc.errors}, request_id)
    except Exception as exc:
        duration_ms = int(round((time.perf_counter() - start) * 1000))
        logger.exception(
            "Error processing request",
            extra={
                "error": str(exc),
                "error_type": type(exc).__name__,
                "retryable": getattr(exc, "retryable", False),
                "duration_ms": duration_ms,
            },
        )
        return _response(
            500,
            {
                "message": "Internal Server Error",
                "error": str(exc) if settings.is_development else "An unexpected error occurred",
            },
            request_id,
        )


def create_handler(
    writer: MetricsStoreWriter, settings: Settings | None = None
) -> Callable[[Any, Any], dict[str, Any]]:
    """Bind a long-lived writer into a ``handler(event, context)`` callable."""

    def handler(event: Any, context: Any = None) -> dict[str, Any]:
        return handle_event(event, writer, settings)

    return handler
