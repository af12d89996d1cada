"""Record store: persist snapshots as tab-separated files and read them back."""

from propagation_latency.store.records import (
    COL_CREATED,
    COL_STATUS_UPDATE,
    custom_record_path,
    read_first_timestamp,
    read_object_records,
    read_work_records,
    standard_record_path,
    write_object_records,
    write_work_records,
)

__all__ = [
    "COL_CREATED",
    "COL_STATUS_UPDATE",
    "custom_record_path",
    "read_first_timestamp",
    "read_object_records",
    "read_work_records",
    "standard_record_path",
    "write_object_records",
    "write_work_records",
]
