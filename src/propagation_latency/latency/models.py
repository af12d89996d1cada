"""Lifecycle timeline and derived latency intervals."""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field


class LifecycleTimestamps(BaseModel):
    """The eight lifecycle instants of one run; None means the source was unavailable."""

    binding_create: datetime | None = None
    wds_deploy_create: datetime | None = None
    wds_deploy_status: datetime | None = None
    manifest_work_create: datetime | None = None
    applied_manifest_create: datetime | None = None
    wec_deploy_create: datetime | None = None
    wec_deploy_status: datetime | None = None
    work_status_update: datetime | None = None


class IntervalStatus(str, Enum):
    OK = "ok"
    MISSING = "missing"  # one endpoint absent
    NEGATIVE = "negative"  # observed order contradicts expected causal order


class Interval(BaseModel):
    """One named duration, always later minus earlier for a fixed pair."""

    name: str
    section: str
    later: str
    earlier: str
    value: timedelta | None = None
    status: IntervalStatus

    @property
    def valid(self) -> bool:
        return self.status is IntervalStatus.OK


class LatencyReport(BaseModel):
    """Raw timestamps plus every named interval, in display order."""

    timestamps: LifecycleTimestamps
    intervals: list[Interval] = Field(default_factory=list)

    def interval(self, name: str) -> Interval:
        for iv in self.intervals:
            if iv.name == name:
                return iv
        raise KeyError(name)

    def sections(self) -> dict[str, list[Interval]]:
        """Intervals grouped by section, preserving order."""
        out: dict[str, list[Interval]] = {}
        for iv in self.intervals:
            out.setdefault(iv.section, []).append(iv)
        return out
