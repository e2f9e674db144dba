from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ticket_metrics.store import InMemoryMetricsTable, MetricsStoreWriter


class SteppingClock:
    def __init__(self, start: float, step: float = 60.0):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def computed_at() -> datetime:
    return datetime(2024, 2, 1, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def ticket_batch() -> list[dict]:
    return [
        {
            "id": "PROJ-1",
            "severity": "high",
            "status": "resolved",
            "createdDate": "2024-01-01T00:00:00Z",
            "resolvedDate": "2024-01-01T12:00:00Z",
        },
        {
            "id": "PROJ-2",
            "severity": "critical",
            "status": "closed",
            "createdDate": "2024-01-02T00:00:00Z",
            "resolvedDate": "2024-01-02T10:00:00Z",
        },
        {
            "id": "PROJ-3",
            "severity": "Critical",
            "status": "Resolved",
            "createdDate": "2024-01-03T00:00:00Z",
            "resolvedDate": "2024-01-03T03:00:00Z",
        },
        {
            "id": "PROJ-4",
            "severity": "medium",
            "status": "open",
            "createdDate": "2024-01-04T00:00:00Z",
        },
        {
            "id": "PROJ-5",
            "severity": "low",
            "status": "closed",
            "createdDate": "2024-01-05T00:00:00Z",
            "resolvedDate": "2024-01-10T00:00:00Z",
        },
        {
            "id": "PROJ-6",
            "severity": "LOW",
            "status": "in progress",
            "createdDate": "not-a-date",
            "resolvedDate": "2024-01-10T00:00:00Z",
        },
    ]


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock(1_700_000_000.0)


@pytest.fixture
def memory_table() -> InMemoryMetricsTable:
    return InMemoryMetricsTable("MetricsHistory")


@pytest.fixture
def writer(memory_table: InMemoryMetricsTable, clock: SteppingClock) -> MetricsStoreWriter:
    return MetricsStoreWriter(memory_table, clock=clock)
