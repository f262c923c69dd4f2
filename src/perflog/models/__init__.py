"""
Data models and structures for the sampler.

Configuration Models:
- Sampler cadence, output location and run artifact settings

Sample Models:
- Per-tick rows and the tagged outcome of a single field query
- The CSV layout shared by the sink and the statistics code

Runtime Models:
- Generated file paths and the explicit run context

Result Models:
- Per-field statistics and the run summary
"""

# Configuration models
from .config import (
    AppConfig,
    OutputConfig,
    SamplerConfig,
    StorageConfig,
    compute_total_ticks,
)

# Sample models
from .sample import (
    CSV_HEADER,
    METRIC_COLUMNS,
    MISSING_TOKEN,
    TIMESTAMP_FORMAT,
    FieldReading,
    Sample,
    format_metric,
    round_half_up,
)

# Runtime models
from .runtime import RunContext, RunPaths

# Result models
from .results import FieldStats, SummaryStats

__all__ = [
    # Configuration
    "AppConfig",
    "OutputConfig",
    "SamplerConfig",
    "StorageConfig",
    "compute_total_ticks",
    # Samples
    "CSV_HEADER",
    "METRIC_COLUMNS",
    "MISSING_TOKEN",
    "TIMESTAMP_FORMAT",
    "FieldReading",
    "Sample",
    "format_metric",
    "round_half_up",
    # Runtime
    "RunContext",
    "RunPaths",
    # Results
    "FieldStats",
    "SummaryStats",
]
