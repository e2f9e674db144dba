"""Severity, resolution-time and SLA analytics over a ticket batch."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd

from .constants import SEVERITIES, SLA_TARGET_HOURS
from .models import Metrics, Ticket, format_timestamp, zero_severity_map
from .preprocessing import build_ticket_frame


def round_one_decimal(value: float) -> float:
    # Half-up on the exact binary value, so 12.25 -> 12.3 and 0.15 -> 0.1.
    if value is None or not np.isfinite(value):
        return 0.0
    rounded = float(Decimal(float(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    return rounded or 0.0


def _safe_percentage(num: float, den: float) -> float:
    if den == 0:
        return 0.0
    return round_one_decimal(float(num) / float(den) * 100.0)


def severity_distribution(df: pd.DataFrame) -> dict[str, float]:
    total = len(df)
    counts = df["severity"].value_counts()
    return {severity: _safe_percentage(counts.get(severity, 0), total) for severity in SEVERITIES}


def _resolved_with_dates(df: pd.DataFrame) -> pd.DataFrame:
    return df[df["has_resolution"]]


def average_resolution_times(df: pd.DataFrame) -> dict[str, float]:
    qualifying = _resolved_with_dates(df)
    result = zero_severity_map()
    if qualifying.empty:
        return result

    grouped = qualifying.groupby("severity").agg(
        total_hours=("resolution_hours", "sum"),
        tickets=("resolution_hours", "count"),
    )
    for severity, row in grouped.iterrows():
        if row["tickets"] > 0:
            result[severity] = round_one_decimal(row["total_hours"] / row["tickets"])
    return result


def sla_compliance(df: pd.DataFrame, targets: Mapping[str, float] | None = None) -> dict[str, float]:
    sla_map = dict(SLA_TARGET_HOURS)
    if targets:
        for key, value in targets.items():
            if value is None or str(key).lower() not in sla_map:
                continue
            sla_map[str(key).lower()] = float(value)

    qualifying = _resolved_with_dates(df).copy()
    result = zero_severity_map()
    if qualifying.empty:
        return result

    qualifying["sla_target_hours"] = qualifying["severity"].map(sla_map)
    qualifying["is_compliant"] = qualifying["resolution_hours"] <= qualifying["sla_target_hours"]

    grouped = qualifying.groupby("severity").agg(
        compliant=("is_compliant", "sum"),
        tickets=("is_compliant", "size"),
    )
    for severity, row in grouped.iterrows():
        result[severity] = _safe_percentage(row["compliant"], row["tickets"])
    return result


def status_counts(df: pd.DataFrame) -> tuple[int, int]:
    """Return ``(open, resolved)`` ticket counts."""
    resolved = int(df["is_resolved"].sum())
    return len(df) - resolved, resolved


def compute_metrics(
    project_id: str,
    tickets: Iterable[Mapping[str, Any] | Ticket],
    timestamp: str | datetime | None = None,
    case_sensitive_status: bool = False,
    sla_targets: Mapping[str, float] | None = None,
) -> Metrics:
    if not isinstance(timestamp, str):
        timestamp = format_timestamp(timestamp)

    df = build_ticket_frame(tickets, case_sensitive_status=case_sensitive_status)
    open_tickets, resolved_tickets = status_counts(df)

    return Metrics(
        project_id=project_id,
        timestamp=timestamp,
        severity_distribution=severity_distribution(df),
        average_resolution_times=average_resolution_times(df),
        sla_compliance=sla_compliance(df, targets=sla_targets),
        ticket_count=int(len(df)),
        open_tickets=open_tickets,
        resolved_tickets=resolved_tickets,
    )
