"""Operational helpers."""

from cfbtrends.ops.logging import configure_logging
from cfbtrends.ops.metrics import MetricsRecorder, get_metrics_recorder, timed

__all__ = ["configure_logging", "MetricsRecorder", "get_metrics_recorder", "timed"]
