"""Error taxonomy for collection and latency reconstruction."""

from __future__ import annotations

from pathlib import Path


class LatencyCollectorError(Exception):
    """Base class for all collector failures."""


class ClusterConnectionError(LatencyCollectorError):
    """Kubeconfig or context could not be loaded for a plane."""

    def __init__(self, context: str, reason: str) -> None:
        self.context = context
        super().__init__(f"cannot connect to context {context!r}: {reason}")


class CollectionError(LatencyCollectorError):
    """A list or get call against a cluster failed."""

    def __init__(self, context: str, kind: str, namespace: str | None, reason: str) -> None:
        self.context = context
        self.kind = kind
        self.namespace = namespace
        where = f"namespace {namespace!r}" if namespace else "cluster scope"
        super().__init__(f"failed to list {kind} in {where} on context {context!r}: {reason}")


class RecordFileError(LatencyCollectorError):
    """A record file could not yield the requested timestamp."""

    def __init__(self, path: Path, message: str, column: int | None = None) -> None:
        self.path = Path(path)
        self.column = column
        super().__init__(f"{message} ({self.path})")


class RecordFileMissingError(RecordFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, "record file not found")


class RecordHeaderMissingError(RecordFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, "record file has no header line")


class RecordRowMissingError(RecordFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, "no data rows found")


class RecordColumnMissingError(RecordFileError):
    def __init__(self, path: Path, column: int) -> None:
        super().__init__(path, f"column {column} missing in first data row", column)


class RecordUnreadableError(RecordFileError):
    def __init__(self, path: Path, reason: str) -> None:
        self.reason = reason
        super().__init__(path, f"record file unreadable: {reason}")


class EmptyTimestampError(RecordFileError):
    def __init__(self, path: Path, column: int) -> None:
        super().__init__(path, f"empty timestamp in column {column}", column)


class InvalidTimestampError(RecordFileError):
    def __init__(self, path: Path, column: int, value: str) -> None:
        self.value = value
        super().__init__(path, f"invalid timestamp {value!r} in column {column}", column)


class ReconstructionError(LatencyCollectorError):
    """A required lifecycle timestamp could not be assembled."""

    def __init__(self, step: str, cause: Exception) -> None:
        self.step = step
        super().__init__(f"{step}: {cause}")
