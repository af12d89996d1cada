"""Latency layer: rebuild the lifecycle timeline and derive named intervals."""

from propagation_latency.latency.models import (
    Interval,
    IntervalStatus,
    LatencyReport,
    LifecycleTimestamps,
)
from propagation_latency.latency.reconstructor import INTERVALS, compute_intervals, reconstruct
from propagation_latency.latency.report import print_report, render_text, write_report

__all__ = [
    "INTERVALS",
    "Interval",
    "IntervalStatus",
    "LatencyReport",
    "LifecycleTimestamps",
    "compute_intervals",
    "print_report",
    "reconstruct",
    "render_text",
    "write_report",
]
