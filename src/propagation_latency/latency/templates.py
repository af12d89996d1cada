"""Text templates for the durable latency report."""

REPORT_HEADER = """Propagation Latency Results
Every timestamp used in the intervals below:
"""

REPORT_RULE = "================================"

SECTION_TITLE = """
{title}
{underline}"""

REPORT_LINE = "{label:<25}{value}"

INVALID_INTERVAL = "N/A (invalid timestamp order)"

MISSING_TIMESTAMP = "N/A (not reported)"

# Display order and labels of the raw timestamps
TIMESTAMP_LABELS = (
    ("binding_create", "Binding Create"),
    ("wds_deploy_create", "WDS Deploy Create"),
    ("manifest_work_create", "Manifest Work Create"),
    ("applied_manifest_create", "Applied Manifest Create"),
    ("wec_deploy_create", "WEC Deploy Create"),
    ("wec_deploy_status", "WEC Deploy Status"),
    ("wds_deploy_status", "WDS Deploy Status"),
    ("work_status_update", "Work Status Update"),
)
