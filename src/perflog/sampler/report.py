"""
Console formatting of progress lines and the run summary.
"""

import logging
from typing import List, Optional

from ..models.results import FieldStats, SummaryStats
from ..models.sample import MISSING_TOKEN, Number, Sample, format_metric, round_half_up

logger = logging.getLogger(__name__)

SUMMARY_LABELS = {
    "cpu_frequency_mhz": "CPU Speed (MHz)",
    "cpu_usage_pct": "CPU Usage (%)",
    "memory_usage_pct": "Memory Usage (%)",
}


def _with_unit(value: Optional[Number], unit: str) -> str:
    text = format_metric(value)
    return text if text == MISSING_TOKEN else f"{text}{unit}"


def format_progress_line(sample: Sample, total_ticks: int) -> str:
    """One console line per tick: index, timestamp and the three metrics."""
    return (
        f"[{sample.tick}/{total_ticks}] {sample.timestamp_str} | "
        f"CPU Speed: {_with_unit(sample.cpu_frequency_mhz, ' MHz')} | "
        f"CPU Usage: {_with_unit(sample.cpu_usage_pct, '%')} | "
        f"Memory Usage: {_with_unit(sample.memory_usage_pct, '%')}"
    )


def format_field_stats(stats: FieldStats) -> str:
    label = SUMMARY_LABELS.get(stats.field, stats.field)
    counts = f"valid samples: {stats.valid_count}/{stats.total_count}"
    if not stats.has_data:
        return f"{label}: no valid data ({counts})"
    return (
        f"{label}: average {round_half_up(stats.average, 2):.2f}, "
        f"minimum {round_half_up(stats.minimum, 2):.2f}, "
        f"maximum {round_half_up(stats.maximum, 2):.2f} ({counts})"
    )


def format_summary(stats: SummaryStats) -> List[str]:
    """Lines of the end-of-run summary block."""
    status = "interrupted" if stats.interrupted else "completed"
    lines = [
        "===== Run summary =====",
        f"Run {status}: {stats.ticks_completed}/{stats.total_ticks} ticks",
    ]
    if stats.output_file is not None:
        lines.append(f"Data file: {stats.output_file}")
    lines.extend(format_field_stats(field_stats) for field_stats in stats.fields.values())
    return lines


def log_summary(stats: SummaryStats, log: Optional[logging.Logger] = None) -> None:
    effective_logger = log or logger
    for line in format_summary(stats):
        effective_logger.info(line)
