"""Propagation latency collector for WDS → ITS → WEC workload delivery."""

__version__ = "0.1.0"
