"""Structured snapshot records collected from each plane."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Condition(str, Enum):
    """Coarse condition of a standard object."""

    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"
    ACTIVE = "Active"
    EXISTS = "Exists"


class GroupVersionResource(BaseModel):
    """Identifies a custom resource collection."""

    model_config = ConfigDict(frozen=True)

    group: str
    version: str
    resource: str

    def __str__(self) -> str:
        return f"{self.resource}.{self.version}.{self.group}"


MANIFEST_WORKS = GroupVersionResource(
    group="work.open-cluster-management.io", version="v1", resource="manifestworks"
)
APPLIED_MANIFEST_WORKS = GroupVersionResource(
    group="work.open-cluster-management.io", version="v1", resource="appliedmanifestworks"
)
WORK_STATUSES = GroupVersionResource(
    group="control.kubestellar.io", version="v1alpha1", resource="workstatuses"
)
BINDING_POLICIES = GroupVersionResource(
    group="control.kubestellar.io", version="v1alpha1", resource="bindingpolicies"
)


class ObjectSnapshot(BaseModel):
    """Snapshot of a Deployment, Service, Secret or ConfigMap."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    created_at: datetime
    status_updated_at: datetime | None = None
    condition: Condition
    manager: str = ""


class WorkSnapshot(BaseModel):
    """Snapshot of a transport custom resource (manifest-work, work-status, applied-manifest-work)."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    created_at: datetime
    updated_at: datetime | None = None
    status_phase: str = ""
    target_object: str = ""
