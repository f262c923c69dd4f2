"""
The sampler: fixed-cadence loop, end-of-run statistics and console report.
"""

from .loop import SamplerLoop, run
from .report import format_field_stats, format_progress_line, format_summary, log_summary
from .stats import compute_field_stats, compute_summary_stats

__all__ = [
    "SamplerLoop",
    "run",
    "compute_field_stats",
    "compute_summary_stats",
    "format_field_stats",
    "format_progress_line",
    "format_summary",
    "log_summary",
]
