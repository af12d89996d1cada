"""Experiment driver: snapshot every plane → persist → reconstruct → report."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from propagation_latency.collection import (
    APPLIED_MANIFEST_WORKS,
    MANIFEST_WORKS,
    WORK_STATUSES,
    ClusterReader,
)
from propagation_latency.config import Settings, get_settings
from propagation_latency.latency import (
    LatencyReport,
    compute_intervals,
    print_report,
    reconstruct,
    write_report,
)
from propagation_latency.store import write_object_records, write_work_records

logger = logging.getLogger(__name__)

PLANE_WDS = "wds"
PLANE_ITS = "its"
PLANE_WEC = "wec"


@dataclass
class Planes:
    """One independently owned reader per plane."""

    wds: ClusterReader
    its: ClusterReader
    wec: ClusterReader

    @classmethod
    def from_settings(cls, settings: Settings) -> Planes:
        kubeconfig = str(settings.kubeconfig) if settings.kubeconfig else None
        return cls(
            wds=ClusterReader(settings.wds_context, kubeconfig=kubeconfig),
            its=ClusterReader(settings.its_context, kubeconfig=kubeconfig),
            wec=ClusterReader(settings.wec_context, kubeconfig=kubeconfig),
        )


@dataclass
class ExperimentResult:
    """Result of one collection run."""

    output_dir: Path
    namespaces: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    report: LatencyReport | None = None
    report_paths: tuple[Path, ...] = ()


def collect_namespace(planes: Planes, settings: Settings, namespace: str) -> list[Path]:
    """Snapshot and persist all standard then custom kinds for namespace."""
    out = settings.output_dir
    written: list[Path] = []

    for kind in settings.standard_kinds:
        wds_records = planes.wds.list_standard(kind, namespace)
        written.append(write_object_records(out, namespace, kind, PLANE_WDS, wds_records))
        wec_records = planes.wec.list_standard(kind, namespace)
        written.append(write_object_records(out, namespace, kind, PLANE_WEC, wec_records))

    selector = settings.label_selector(namespace)
    manifest_works = planes.its.list_custom(MANIFEST_WORKS, settings.work_namespace, selector)
    work_statuses = planes.its.list_custom(WORK_STATUSES, settings.work_namespace, selector)
    applied_plane = planes.wec if settings.applied_work_plane == PLANE_WEC else planes.its
    # Applied works are cluster-scoped on the executing side
    applied_works = applied_plane.list_custom(
        APPLIED_MANIFEST_WORKS,
        None,
        selector if settings.filter_applied_works else None,
    )

    written.append(write_work_records(out, namespace, MANIFEST_WORKS.resource, manifest_works))
    written.append(write_work_records(out, namespace, WORK_STATUSES.resource, work_statuses))
    written.append(write_work_records(out, namespace, APPLIED_MANIFEST_WORKS.resource, applied_works))
    logger.info(
        "Collected %s: %d manifest-works, %d work-statuses, %d applied-manifest-works",
        namespace,
        len(manifest_works),
        len(work_statuses),
        len(applied_works),
    )
    return written


def run_experiment(settings: Settings | None = None, planes: Planes | None = None) -> ExperimentResult:
    """
    Run one experiment pass. Collection errors propagate and abort the run;
    the report is only written once reconstruction succeeds.
    """
    opts = settings or get_settings()
    readers = planes or Planes.from_settings(opts)
    result = ExperimentResult(output_dir=opts.output_dir, namespaces=opts.namespaces())

    if opts.exp_type != "s":
        logger.warning("Long experiment collection is not implemented yet")
        return result

    for ns in result.namespaces:
        result.written.extend(collect_namespace(readers, opts, ns))

    # Latency is measured on the first namespace only
    timestamps = reconstruct(
        opts.output_dir,
        readers.wds,
        namespace=result.namespaces[0],
        binding_policy=opts.binding_policy,
        wds_plane=PLANE_WDS,
        wec_plane=PLANE_WEC,
    )
    result.report = compute_intervals(timestamps)
    result.report_paths = write_report(result.report, opts.output_dir)
    return result


def print_result(result: ExperimentResult, console: Console | None = None) -> None:
    """Print experiment result to console using Rich."""
    c = console or Console()
    if result.report is None:
        c.print("[yellow]No latency report produced.[/yellow]")
        return
    print_report(result.report, c)
    c.print(f"\nMetrics written to: [bold]{result.report_paths[0]}[/bold]")
