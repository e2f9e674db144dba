"""Ticket batch analytics and metrics persistence."""

from .analytics import compute_metrics
from .models import Metrics, Ticket
from .pipeline import run_metrics_pipeline
from .store import MetricsStoreWriter

__all__ = ["Metrics", "MetricsStoreWriter", "Ticket", "compute_metrics", "run_metrics_pipeline"]
