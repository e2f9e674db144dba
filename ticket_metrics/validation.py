"""Input shape checks for analytics requests."""

from __future__ import annotations

from typing import Any, Mapping

from .constants import SEVERITIES
from .exceptions import RequestValidationError


def validate_request(payload: Any) -> list[str]:
    """Return human-readable problems with ``payload``; empty when valid."""
    errors: list[str] = []
    if not isinstance(payload, Mapping):
        payload = {}

    project_id = payload.get("projectId")
    if not isinstance(project_id, str) or not project_id:
        errors.append("projectId is required and must be a string")

    tickets = payload.get("tickets")
    if not isinstance(tickets, list):
        errors.append("tickets must be an array")
        return errors
    if not tickets:
        errors.append("tickets array cannot be empty")
        return errors

    allowed = ", ".join(SEVERITIES)
    for index, ticket in enumerate(tickets):
        if not isinstance(ticket, Mapping):
            errors.append(f"Ticket {index}: must be an object")
            continue
        if not ticket.get("id"):
            errors.append(f"Ticket {index}: id is required")
        severity = ticket.get("severity")
        if not severity:
            errors.append(f"Ticket {index}: severity is required")
        if not isinstance(severity, str) or severity.lower() not in SEVERITIES:
            errors.append(f"Ticket {index}: severity must be one of: {allowed}")

    return errors


def ensure_valid_request(payload: Any) -> None:
    errors = validate_request(payload)
    if errors:
        raise RequestValidationError(errors)
