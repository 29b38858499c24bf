"""Services built on top of the tracker (metrics)."""

from pullpal.services.metrics import MetricsAggregator, format_time_difference

__all__ = ["MetricsAggregator", "format_time_difference"]
