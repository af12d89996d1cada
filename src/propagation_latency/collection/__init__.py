"""Collection layer: snapshot standard and custom resources from each plane."""

from propagation_latency.collection.models import (
    APPLIED_MANIFEST_WORKS,
    MANIFEST_WORKS,
    WORK_STATUSES,
    Condition,
    GroupVersionResource,
    ObjectSnapshot,
    WorkSnapshot,
)
from propagation_latency.collection.reader import ClusterReader

__all__ = [
    "APPLIED_MANIFEST_WORKS",
    "MANIFEST_WORKS",
    "WORK_STATUSES",
    "ClusterReader",
    "Condition",
    "GroupVersionResource",
    "ObjectSnapshot",
    "WorkSnapshot",
]
