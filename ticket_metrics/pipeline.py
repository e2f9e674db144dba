"""Compute-then-persist orchestration for a ticket batch."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

from .analytics import compute_metrics
from .logging_config import get_logger
from .models import Metrics, Ticket
from .store import MetricsStoreWriter

logger = get_logger(__name__)


def run_metrics_pipeline(
    project_id: str,
    tickets: Iterable[Mapping[str, Any] | Ticket],
    writer: MetricsStoreWriter,
    timestamp: str | datetime | None = None,
    case_sensitive_status: bool = False,
    sla_targets: Mapping[str, float] | None = None,
) -> Metrics:
    metrics = compute_metrics(
        project_id,
        tickets,
        timestamp=timestamp,
        case_sensitive_status=case_sensitive_status,
        sla_targets=sla_targets,
    )
    logger.debug("Processed metrics", extra={"metrics": metrics.to_dict()})
    return writer.persist(metrics)
