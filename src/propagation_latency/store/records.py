"""Tab-separated record files, one directory per namespace, kind and plane."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable

from propagation_latency.collection.models import Condition, ObjectSnapshot, WorkSnapshot
from propagation_latency.errors import (
    EmptyTimestampError,
    InvalidTimestampError,
    RecordColumnMissingError,
    RecordFileMissingError,
    RecordHeaderMissingError,
    RecordRowMissingError,
    RecordUnreadableError,
)
from propagation_latency.timestamps import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

OBJECT_HEADER = ("Name", "Created", "StatusUpdate", "Condition", "Manager")
WORK_HEADER = ("Name", "Created", "Updated", "Status", "TargetObject")

# 0-indexed columns shared by both layouts
COL_CREATED = 1
COL_STATUS_UPDATE = 2

RECORD_SUFFIX = ".tsv"


def standard_record_path(output_dir: Path | str, namespace: str, kind: str, plane: str) -> Path:
    return Path(output_dir) / namespace / f"{kind}-{plane}" / f"{kind}{RECORD_SUFFIX}"


def custom_record_path(output_dir: Path | str, namespace: str, kind: str) -> Path:
    return Path(output_dir) / namespace / kind / f"{kind}{RECORD_SUFFIX}"


def _write_rows(path: Path, header: tuple[str, ...], rows: Iterable[list[str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)
            count += 1
    logger.debug("Wrote %d records to %s", count, path)
    return path


def write_object_records(
    output_dir: Path | str,
    namespace: str,
    kind: str,
    plane: str,
    records: Iterable[ObjectSnapshot],
) -> Path:
    """Rewrite the standard-kind record file for (namespace, kind, plane)."""
    rows = (
        [
            r.name,
            format_timestamp(r.created_at),
            format_timestamp(r.status_updated_at),
            r.condition.value,
            r.manager,
        ]
        for r in records
    )
    return _write_rows(standard_record_path(output_dir, namespace, kind, plane), OBJECT_HEADER, rows)


def write_work_records(
    output_dir: Path | str,
    namespace: str,
    kind: str,
    records: Iterable[WorkSnapshot],
) -> Path:
    """Rewrite the custom-resource record file for (namespace, kind)."""
    rows = (
        [
            r.name,
            format_timestamp(r.created_at),
            format_timestamp(r.updated_at),
            r.status_phase,
            r.target_object,
        ]
        for r in records
    )
    return _write_rows(custom_record_path(output_dir, namespace, kind), WORK_HEADER, rows)


def _read_rows(path: Path) -> list[list[str]]:
    """Return data rows (header skipped)."""
    path = Path(path)
    if not path.is_file():
        raise RecordFileMissingError(path)
    try:
        with path.open(newline="", encoding="utf-8") as f:
            reader = csv.reader(f, delimiter="\t")
            header = next(reader, None)
            rows = [row for row in reader if row]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise RecordUnreadableError(path, str(e)) from e
    if not header:
        raise RecordHeaderMissingError(path)
    return rows


def _optional_time(value: str) -> datetime | None:
    return parse_timestamp(value) if value.strip() else None


def _padded(row: list[str], width: int) -> list[str]:
    return row + [""] * (width - len(row))


def read_object_records(path: Path | str, namespace: str) -> list[ObjectSnapshot]:
    """Read a standard-kind record file back into snapshots."""
    out = []
    for row in _read_rows(Path(path)):
        name, created, status, condition, manager = _padded(row, len(OBJECT_HEADER))[: len(OBJECT_HEADER)]
        out.append(
            ObjectSnapshot(
                name=name,
                namespace=namespace,
                created_at=parse_timestamp(created),
                status_updated_at=_optional_time(status),
                condition=Condition(condition),
                manager=manager,
            )
        )
    return out


def read_work_records(path: Path | str, namespace: str) -> list[WorkSnapshot]:
    """Read a custom-resource record file back into snapshots."""
    out = []
    for row in _read_rows(Path(path)):
        name, created, updated, status, target = _padded(row, len(WORK_HEADER))[: len(WORK_HEADER)]
        out.append(
            WorkSnapshot(
                name=name,
                namespace=namespace,
                created_at=parse_timestamp(created),
                updated_at=_optional_time(updated),
                status_phase=status,
                target_object=target,
            )
        )
    return out


def read_first_timestamp(path: Path | str, column: int) -> datetime:
    """
    Parse column of the first data row as a timestamp.

    Each experiment namespace holds exactly one object of interest, so the first
    row is taken as representative of the whole collection.
    """
    path = Path(path)
    rows = _read_rows(path)
    if not rows:
        raise RecordRowMissingError(path)
    row = rows[0]
    if len(row) <= column:
        raise RecordColumnMissingError(path, column)
    value = row[column].strip()
    if not value:
        raise EmptyTimestampError(path, column)
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise InvalidTimestampError(path, column, value) from e
