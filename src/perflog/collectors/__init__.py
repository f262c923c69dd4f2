"""
Metrics sources for host performance sampling.

This package provides:

- An abstract interface defining the readings the sampler loop depends on
- A psutil-backed implementation
- A factory for runtime source selection

Each reading is independently fallible; failures surface as missing
FieldReadings rather than exceptions.
"""

from .base import (
    CPU_USAGE_FIELD,
    FIELD_LABELS,
    FREQUENCY_FIELD,
    MEMORY_USAGE_FIELD,
    AbstractMetricsSource,
    collect_field,
)
from .factory import create_metrics_source
from .psutil_source import PsutilMetricsSource

__all__ = [
    "AbstractMetricsSource",
    "PsutilMetricsSource",
    "collect_field",
    "create_metrics_source",
    "CPU_USAGE_FIELD",
    "FIELD_LABELS",
    "FREQUENCY_FIELD",
    "MEMORY_USAGE_FIELD",
]
