"""Rebuild the lifecycle timeline of a run from its record files and derive latencies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol

from propagation_latency.collection.models import (
    APPLIED_MANIFEST_WORKS,
    MANIFEST_WORKS,
    WORK_STATUSES,
)
from propagation_latency.errors import LatencyCollectorError, ReconstructionError, RecordFileError
from propagation_latency.latency.models import (
    Interval,
    IntervalStatus,
    LatencyReport,
    LifecycleTimestamps,
)
from propagation_latency.store.records import (
    COL_CREATED,
    COL_STATUS_UPDATE,
    custom_record_path,
    read_first_timestamp,
    standard_record_path,
)

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "perf-test-0"
DEFAULT_BINDING_POLICY = "nginx-bpolicy"

SECTION_DOWNSYNC = "Downsync"
SECTION_UPSYNC = "Upsync"
SECTION_END_TO_END = "End-to-End"


class BindingSource(Protocol):
    def get_binding_policy_created(self, name: str) -> datetime: ...


@dataclass(frozen=True)
class IntervalSpec:
    name: str
    section: str
    later: str
    earlier: str


INTERVALS: tuple[IntervalSpec, ...] = (
    IntervalSpec("Binding→WDS deploy", SECTION_DOWNSYNC, "wds_deploy_create", "binding_create"),
    IntervalSpec("Binding→Manifest pkg", SECTION_DOWNSYNC, "manifest_work_create", "wds_deploy_create"),
    IntervalSpec("Manifest→Applied MW", SECTION_DOWNSYNC, "manifest_work_create", "applied_manifest_create"),
    IntervalSpec("Applied MW→WEC deploy", SECTION_DOWNSYNC, "wec_deploy_create", "applied_manifest_create"),
    IntervalSpec("Total Downsync", SECTION_DOWNSYNC, "wec_deploy_create", "wds_deploy_create"),
    IntervalSpec("WEC status→WDS status", SECTION_UPSYNC, "wds_deploy_status", "work_status_update"),
    IntervalSpec("WEC status→WDS final", SECTION_UPSYNC, "wds_deploy_status", "wec_deploy_status"),
    IntervalSpec("Total Upsync", SECTION_UPSYNC, "wds_deploy_status", "wec_deploy_status"),
    IntervalSpec("End-to-End", SECTION_END_TO_END, "wds_deploy_status", "wds_deploy_create"),
)


def _deployment_times(path: Path) -> tuple[datetime, datetime]:
    return read_first_timestamp(path, COL_CREATED), read_first_timestamp(path, COL_STATUS_UPDATE)


def reconstruct(
    output_dir: Path | str,
    origin: BindingSource,
    *,
    namespace: str = DEFAULT_NAMESPACE,
    binding_policy: str = DEFAULT_BINDING_POLICY,
    wds_plane: str = "wds",
    wec_plane: str = "wec",
) -> LifecycleTimestamps:
    """
    Assemble the eight lifecycle timestamps for namespace.

    The binding policy creation is read live from the origin plane; every other
    instant comes from the first data row of a record file. Only the work-status
    instant is optional, since status may legitimately not be reported yet.
    Raises ReconstructionError naming the failed step otherwise.
    """
    ts = LifecycleTimestamps()
    logger.info("Gathering latency data for %s", namespace)

    try:
        ts.binding_create = origin.get_binding_policy_created(binding_policy)
    except LatencyCollectorError as e:
        raise ReconstructionError("binding-policy", e) from e
    logger.info("Binding created at %s", ts.binding_create)

    wds_path = standard_record_path(output_dir, namespace, "deployments", wds_plane)
    logger.info("Reading WDS deployments from %s", wds_path)
    try:
        ts.wds_deploy_create, ts.wds_deploy_status = _deployment_times(wds_path)
    except RecordFileError as e:
        raise ReconstructionError("wds-deployments", e) from e

    wec_path = standard_record_path(output_dir, namespace, "deployments", wec_plane)
    logger.info("Reading WEC deployments from %s", wec_path)
    try:
        ts.wec_deploy_create, ts.wec_deploy_status = _deployment_times(wec_path)
    except RecordFileError as e:
        raise ReconstructionError("wec-deployments", e) from e

    mw_path = custom_record_path(output_dir, namespace, MANIFEST_WORKS.resource)
    logger.info("Reading ManifestWorks from %s", mw_path)
    try:
        ts.manifest_work_create = read_first_timestamp(mw_path, COL_CREATED)
    except RecordFileError as e:
        raise ReconstructionError(MANIFEST_WORKS.resource, e) from e

    amw_path = custom_record_path(output_dir, namespace, APPLIED_MANIFEST_WORKS.resource)
    logger.info("Reading AppliedManifestWorks from %s", amw_path)
    try:
        ts.applied_manifest_create = read_first_timestamp(amw_path, COL_CREATED)
    except RecordFileError as e:
        raise ReconstructionError(APPLIED_MANIFEST_WORKS.resource, e) from e

    ws_path = custom_record_path(output_dir, namespace, WORK_STATUSES.resource)
    logger.info("Reading WorkStatuses from %s", ws_path)
    try:
        ts.work_status_update = read_first_timestamp(ws_path, COL_CREATED)
    except RecordFileError as e:
        logger.warning("WorkStatus update time unavailable (%s); status may not be reported yet", e)
        ts.work_status_update = None

    return ts


def compute_interval(spec: IntervalSpec, timestamps: LifecycleTimestamps) -> Interval:
    later = getattr(timestamps, spec.later)
    earlier = getattr(timestamps, spec.earlier)
    if later is None or earlier is None:
        value, status = None, IntervalStatus.MISSING
    else:
        value = later - earlier
        status = IntervalStatus.NEGATIVE if value.total_seconds() < 0 else IntervalStatus.OK
    return Interval(
        name=spec.name,
        section=spec.section,
        later=spec.later,
        earlier=spec.earlier,
        value=value,
        status=status,
    )


def compute_intervals(timestamps: LifecycleTimestamps) -> LatencyReport:
    """Derive every named interval from the timeline; never raises on bad ordering."""
    return LatencyReport(
        timestamps=timestamps,
        intervals=[compute_interval(spec, timestamps) for spec in INTERVALS],
    )
