"""Ticket input and metrics record types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping

from .constants import SEVERITIES, TTL_ATTRIBUTE


def zero_severity_map() -> dict[str, float]:
    return {severity: 0 for severity in SEVERITIES}


def format_timestamp(moment: datetime | None = None) -> str:
    """Render a UTC ISO-8601 timestamp with millisecond precision and a ``Z`` suffix."""
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Ticket:
    id: str
    severity: str | None = None
    status: str | None = None
    created_date: Any = None
    resolved_date: Any = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Ticket":
        raw_id = payload.get("id")
        return cls(
            id="" if raw_id is None else str(raw_id),
            severity=payload.get("severity"),
            status=payload.get("status"),
            created_date=payload.get("createdDate"),
            resolved_date=payload.get("resolvedDate"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity,
            "status": self.status,
            "createdDate": self.created_date,
            "resolvedDate": self.resolved_date,
        }


def _to_number(value: Any) -> int | float:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _severity_map_from_item(value: Any) -> dict[str, float]:
    result = zero_severity_map()
    if isinstance(value, Mapping):
        for severity in SEVERITIES:
            if severity in value:
                result[severity] = _to_number(value[severity])
    return result


@dataclass(frozen=True)
class Metrics:
    """Analytics computed for one batch of a project's tickets.

    ``expiration`` is assigned by the store on first write and is ``None``
    on a freshly computed record.
    """

    project_id: str
    timestamp: str
    severity_distribution: dict[str, float] = field(default_factory=zero_severity_map)
    average_resolution_times: dict[str, float] = field(default_factory=zero_severity_map)
    sla_compliance: dict[str, float] = field(default_factory=zero_severity_map)
    ticket_count: int = 0
    open_tickets: int = 0
    resolved_tickets: int = 0
    expiration: int | None = None
    updated_at: str | None = None

    @property
    def key(self) -> dict[str, str]:
        return {"projectId": self.project_id, "timestamp": self.timestamp}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "projectId": self.project_id,
            "timestamp": self.timestamp,
            "severityDistribution": dict(self.severity_distribution),
            "averageResolutionTimes": dict(self.average_resolution_times),
            "slaCompliance": dict(self.sla_compliance),
            "ticketCount": self.ticket_count,
            "openTickets": self.open_tickets,
            "resolvedTickets": self.resolved_tickets,
        }
        if self.expiration is not None:
            payload["expiration"] = self.expiration
        if self.updated_at is not None:
            payload["updatedAt"] = self.updated_at
        return payload

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "Metrics":
        expiration = item.get(TTL_ATTRIBUTE)
        return cls(
            project_id=str(item["projectId"]),
            timestamp=str(item["timestamp"]),
            severity_distribution=_severity_map_from_item(item.get("severityDistribution")),
            average_resolution_times=_severity_map_from_item(item.get("averageResolutionTimes")),
            sla_compliance=_severity_map_from_item(item.get("slaCompliance")),
            ticket_count=int(item.get("ticketCount", 0)),
            open_tickets=int(item.get("openTickets", 0)),
            resolved_tickets=int(item.get("resolvedTickets", 0)),
            expiration=int(expiration) if expiration is not None else None,
            updated_at=item.get("updatedAt"),
        )
