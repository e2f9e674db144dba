"""Ticket batch normalization into an analysis frame."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd

from .constants import RESOLVED_STATUSES, SEVERITIES, TICKET_COLUMNS
from .models import Ticket

# pandas resolves these to the current wall-clock time
RELATIVE_DATE_WORDS = {"now", "today"}


def _parse_timestamp(value: object) -> pd.Timestamp:
    if isinstance(value, (pd.Timestamp, datetime)):
        parsed = pd.Timestamp(value)
    elif isinstance(value, str) and value.strip():
        if value.strip().lower() in RELATIVE_DATE_WORDS:
            return pd.NaT
        parsed = pd.to_datetime(value.strip(), errors="coerce", utc=True)
    else:
        return pd.NaT

    if pd.isna(parsed):
        return pd.NaT
    if parsed.tzinfo is None:
        return parsed.tz_localize("UTC")
    return parsed.tz_convert("UTC")


def _safe_to_datetime(series: pd.Series) -> pd.Series:
    parsed = series.map(_parse_timestamp)
    return pd.to_datetime(parsed, errors="coerce", utc=True)


def _normalize_severity(value: object) -> object:
    if not isinstance(value, str):
        return np.nan
    lowered = value.lower()
    return lowered if lowered in SEVERITIES else np.nan


def _normalize_status(value: object, case_sensitive: bool) -> object:
    if not isinstance(value, str):
        return None
    if case_sensitive:
        return value
    return value.strip().lower()


def _ticket_records(tickets: Iterable[Mapping[str, Any] | Ticket]) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    for ticket in tickets:
        if isinstance(ticket, Ticket):
            records.append(ticket.to_dict())
        elif isinstance(ticket, Mapping):
            records.append(dict(ticket))
        else:
            records.append({})
    return records


def build_ticket_frame(
    tickets: Iterable[Mapping[str, Any] | Ticket],
    case_sensitive_status: bool = False,
) -> pd.DataFrame:
    """Build one row per ticket with normalized severity, UTC dates and status flags.

    Unrecognized severities become NaN and unparseable dates become NaT, so
    those tickets drop out of severity-keyed aggregates without failing the
    batch.
    """
    raw = pd.DataFrame(_ticket_records(tickets), columns=TICKET_COLUMNS)

    df = pd.DataFrame(index=raw.index)
    df["ticket_id"] = raw["id"]
    df["severity"] = raw["severity"].map(_normalize_severity)
    df["status"] = raw["status"].map(lambda value: _normalize_status(value, case_sensitive_status))
    df["created_at"] = _safe_to_datetime(raw["createdDate"])
    df["resolved_at"] = _safe_to_datetime(raw["resolvedDate"])

    df["resolution_hours"] = (df["resolved_at"] - df["created_at"]).dt.total_seconds() / 3600.0
    df["has_resolution"] = df["severity"].notna() & df["resolution_hours"].notna()

    df["is_resolved"] = df["status"].isin(RESOLVED_STATUSES)
    df["is_open"] = ~df["is_resolved"]

    return df
