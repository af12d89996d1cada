"""Render a LatencyReport to the console, a text file and a JSON file."""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

from rich.console import Console
from rich.table import Table

from propagation_latency.latency.models import Interval, LatencyReport
from propagation_latency.latency.templates import (
    INVALID_INTERVAL,
    MISSING_TIMESTAMP,
    REPORT_HEADER,
    REPORT_LINE,
    REPORT_RULE,
    SECTION_TITLE,
    TIMESTAMP_LABELS,
)
from propagation_latency.timestamps import format_timestamp

logger = logging.getLogger(__name__)

REPORT_TEXT_FILE = "latency_results.txt"
REPORT_JSON_FILE = "latency_results.json"


def format_duration(value: timedelta) -> str:
    """Round to milliseconds and render compactly, e.g. 450ms, 1.25s, 2m3.5s."""
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    sign = "-" if micros < 0 else ""
    ms = (abs(micros) + 500) // 1000
    if ms == 0:
        return "0s"
    if ms < 1000:
        return f"{sign}{ms}ms"
    hours, rem = divmod(ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    seconds, frac = divmod(rem, 1000)
    sec = f"{seconds}.{frac:03d}".rstrip("0") if frac else str(seconds)
    if hours:
        return f"{sign}{hours}h{minutes}m{sec}s"
    if minutes:
        return f"{sign}{minutes}m{sec}s"
    return f"{sign}{sec}s"


def format_interval(interval: Interval) -> str:
    """Duration text, or the invalid sentinel for missing or negative intervals."""
    if not interval.valid or interval.value is None:
        return INVALID_INTERVAL
    return format_duration(interval.value)


def render_text(report: LatencyReport) -> str:
    """Fixed textual layout: raw timestamps first, then intervals per section."""
    lines = [REPORT_HEADER]
    for field, label in TIMESTAMP_LABELS:
        value = getattr(report.timestamps, field)
        lines.append(REPORT_LINE.format(label=f"{label}:", value=format_timestamp(value) or MISSING_TIMESTAMP))
    lines.extend(["", REPORT_RULE])
    for section, intervals in report.sections().items():
        lines.append(SECTION_TITLE.format(title=section, underline="-" * len(section)))
        for iv in intervals:
            lines.append(REPORT_LINE.format(label=f"{iv.name}:", value=format_interval(iv)))
    return "\n".join(lines) + "\n"


def write_report(report: LatencyReport, output_dir: Path | str) -> tuple[Path, Path]:
    """Write the text and JSON reports into output_dir; returns both paths."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    text_path = out / REPORT_TEXT_FILE
    json_path = out / REPORT_JSON_FILE
    text_path.write_text(render_text(report), encoding="utf-8")
    json_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Latency results written to %s", text_path)
    return text_path, json_path


def print_report(report: LatencyReport, console: Console | None = None) -> None:
    """Print the latency summary using Rich."""
    c = console or Console()
    c.print("\n[bold]====== Propagation Latency Results ======[/bold]")
    for section, intervals in report.sections().items():
        table = Table(title=f"{section} Metrics", title_justify="left", show_header=False)
        table.add_column("Interval")
        table.add_column("Latency", justify="right")
        for iv in intervals:
            value = format_interval(iv)
            table.add_row(iv.name, value if iv.valid else f"[yellow]{value}[/yellow]")
        c.print(table)
