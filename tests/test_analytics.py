from __future__ import annotations

import pytest

from ticket_metrics.analytics import (
    average_resolution_times,
    compute_metrics,
    round_one_decimal,
    severity_distribution,
    sla_compliance,
)
from ticket_metrics.preprocessing import build_ticket_frame

ZERO = {"low": 0, "medium": 0, "high": 0, "critical": 0}


def test_round_one_decimal_is_half_up() -> None:
    assert round_one_decimal(12.25) == 12.3
    assert round_one_decimal(16.666666) == 16.7
    assert round_one_decimal(0.15) == 0.1
    assert round_one_decimal(-0.04) == 0.0
    assert round_one_decimal(float("nan")) == 0.0


def test_compute_metrics_on_mixed_batch(ticket_batch, computed_at) -> None:
    metrics = compute_metrics("PROJ", ticket_batch, timestamp=computed_at)

    assert metrics.project_id == "PROJ"
    assert metrics.timestamp == "2024-02-01T09:30:00.000Z"
    assert metrics.severity_distribution == {"low": 33.3, "medium": 16.7, "high": 16.7, "critical": 33.3}
    assert metrics.average_resolution_times == {"low": 120.0, "medium": 0, "high": 12.0, "critical": 6.5}
    assert metrics.sla_compliance == {"low": 100.0, "medium": 0, "high": 100.0, "critical": 50.0}
    assert metrics.ticket_count == 6
    assert metrics.resolved_tickets == 4
    assert metrics.open_tickets == 2
    assert metrics.expiration is None


def test_single_high_ticket_resolved_within_target() -> None:
    metrics = compute_metrics(
        "PROJ",
        [
            {
                "id": "PROJ-1",
                "severity": "high",
                "status": "resolved",
                "createdDate": "2024-01-01T00:00:00Z",
                "resolvedDate": "2024-01-01T12:00:00Z",
            }
        ],
    )

    assert metrics.average_resolution_times["high"] == 12
    assert metrics.sla_compliance["high"] == 100
    assert metrics.severity_distribution["high"] == 100.0
    assert (metrics.ticket_count, metrics.resolved_tickets, metrics.open_tickets) == (1, 1, 0)


def test_critical_ticket_over_target_is_not_compliant() -> None:
    metrics = compute_metrics(
        "PROJ",
        [
            {
                "id": "PROJ-1",
                "severity": "critical",
                "status": "closed",
                "createdDate": "2024-01-01T00:00:00Z",
                "resolvedDate": "2024-01-01T10:00:00Z",
            }
        ],
    )

    assert metrics.sla_compliance["critical"] == 0
    assert metrics.average_resolution_times["critical"] == 10.0


def test_sla_target_boundary_is_inclusive() -> None:
    metrics = compute_metrics(
        "PROJ",
        [
            {
                "id": "PROJ-1",
                "severity": "critical",
                "createdDate": "2024-01-01T00:00:00Z",
                "resolvedDate": "2024-01-01T04:00:00Z",
            }
        ],
    )

    assert metrics.sla_compliance["critical"] == 100.0


def test_unresolved_ticket_is_excluded_from_resolution_aggregates() -> None:
    metrics = compute_metrics(
        "PROJ",
        [{"id": "PROJ-1", "severity": "medium", "status": "open", "createdDate": "2024-01-01T00:00:00Z"}],
    )

    assert metrics.average_resolution_times["medium"] == 0
    assert metrics.sla_compliance["medium"] == 0
    assert metrics.ticket_count == 1
    assert metrics.open_tickets == 1


def test_empty_batch_is_zero_filled() -> None:
    metrics = compute_metrics("PROJ", [])

    assert metrics.severity_distribution == ZERO
    assert metrics.average_resolution_times == ZERO
    assert metrics.sla_compliance == ZERO
    assert (metrics.ticket_count, metrics.open_tickets, metrics.resolved_tickets) == (0, 0, 0)


def test_unrecognized_severity_counts_toward_totals_only() -> None:
    metrics = compute_metrics(
        "PROJ",
        [
            {"id": "A", "severity": "high", "status": "open"},
            {
                "id": "B",
                "severity": "blocker",
                "status": "closed",
                "createdDate": "2024-01-01T00:00:00Z",
                "resolvedDate": "2024-01-01T01:00:00Z",
            },
            {"id": "C", "status": "open"},
        ],
    )

    assert metrics.ticket_count == 3
    assert metrics.severity_distribution == {"low": 0.0, "medium": 0.0, "high": 33.3, "critical": 0.0}
    assert metrics.average_resolution_times == ZERO
    assert metrics.resolved_tickets == 1


@pytest.mark.parametrize("size", [1, 3, 7, 11, 13])
def test_distribution_sums_to_about_one_hundred(size: int) -> None:
    severities = ["low", "medium", "high", "critical"]
    tickets = [{"id": f"T{i}", "severity": severities[i % 4]} for i in range(size)]

    metrics = compute_metrics("PROJ", tickets)

    assert abs(sum(metrics.severity_distribution.values()) - 100) <= 0.4
    assert metrics.ticket_count == metrics.open_tickets + metrics.resolved_tickets


def test_case_sensitive_status_keeps_literal_comparison(ticket_batch) -> None:
    metrics = compute_metrics("PROJ", ticket_batch, case_sensitive_status=True)

    assert metrics.resolved_tickets == 3
    assert metrics.open_tickets == 3


def test_sla_targets_can_be_overridden(ticket_batch) -> None:
    frame = build_ticket_frame(ticket_batch)

    assert sla_compliance(frame, targets={"critical": 12, "unknown": 1})["critical"] == 100.0
    assert sla_compliance(frame)["critical"] == 50.0


def test_helpers_share_frame(ticket_batch) -> None:
    frame = build_ticket_frame(ticket_batch)

    assert severity_distribution(frame)["medium"] == 16.7
    assert average_resolution_times(frame)["low"] == 120.0


def test_relative_resolved_date_does_not_produce_a_duration() -> None:
    metrics = compute_metrics(
        "PROJ",
        [
            {
                "id": "PROJ-1",
                "severity": "low",
                "status": "resolved",
                "createdDate": "2024-01-01T00:00:00Z",
                "resolvedDate": "now",
            }
        ],
    )

    assert metrics.average_resolution_times["low"] == 0
    assert metrics.sla_compliance["low"] == 0
    assert metrics.resolved_tickets == 1
