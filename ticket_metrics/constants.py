"""Constants for ticket metrics computation and storage."""

from __future__ import annotations

from typing import Dict, Tuple

SEVERITIES: Tuple[str, ...] = ("low", "medium", "high", "critical")

RESOLVED_STATUSES = {
    "resolved",
    "closed",
}

SLA_TARGET_HOURS: Dict[str, float] = {
    "critical": 4,
    "high": 24,
    "medium": 72,
    "low": 168,
}

TTL_DAYS = 365
TTL_SECONDS = TTL_DAYS * 24 * 60 * 60

DEFAULT_TABLE_NAME = "MetricsHistory"
DEFAULT_REGION = "us-east-1"
DEFAULT_MAX_ATTEMPTS = 3

TTL_ATTRIBUTE = "ttl"

TICKET_COLUMNS = ["id", "severity", "status", "createdDate", "resolvedDate"]
