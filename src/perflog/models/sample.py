"""
Per-tick sample data models.

This module defines the row produced by one tick of the sampler and the
tagged outcome of a single field query. It also owns the CSV layout
(header, column order, missing-value token, timestamp format) so that the
sink and the statistics code agree on it.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Union

# CSV layout
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MISSING_TOKEN = "N/A"

TIME_COLUMN = "Time"
FREQUENCY_COLUMN = "CPUSpeed(MHz)"
CPU_USAGE_COLUMN = "CPUUsage(%)"
MEMORY_USAGE_COLUMN = "MemoryUsage(%)"

CSV_HEADER: List[str] = [
    TIME_COLUMN,
    FREQUENCY_COLUMN,
    CPU_USAGE_COLUMN,
    MEMORY_USAGE_COLUMN,
]

# Sample attribute name -> CSV column, in column order.
METRIC_COLUMNS = {
    "cpu_frequency_mhz": FREQUENCY_COLUMN,
    "cpu_usage_pct": CPU_USAGE_COLUMN,
    "memory_usage_pct": MEMORY_USAGE_COLUMN,
}

Number = Union[int, float]


@dataclass(frozen=True)
class FieldReading:
    """
    Outcome of querying one metric for one tick.

    Either present (``value`` is a number) or missing (``value`` is None and
    ``reason`` says why). Construct with :meth:`present` or :meth:`missing`.
    """

    field: str
    value: Optional[Number] = None
    reason: Optional[str] = None

    @classmethod
    def present(cls, field: str, value: Number) -> "FieldReading":
        return cls(field=field, value=value)

    @classmethod
    def missing(cls, field: str, reason: str) -> "FieldReading":
        return cls(field=field, value=None, reason=reason)

    @property
    def is_present(self) -> bool:
        return self.value is not None


@dataclass
class Sample:
    """
    One row of a run: wall-clock timestamp plus three optional metrics.

    Attributes:
        tick: 1-based tick index within the run.
        timestamp: Wall-clock time of the tick, truncated to whole seconds.
        cpu_frequency_mhz: Dynamic CPU frequency, or None when missing.
        cpu_usage_pct: CPU utilization in [0, 100], or None when missing.
        memory_usage_pct: Memory utilization in [0, 100], or None when missing.
    """

    tick: int
    timestamp: datetime
    cpu_frequency_mhz: Optional[int] = None
    cpu_usage_pct: Optional[float] = None
    memory_usage_pct: Optional[float] = None

    @classmethod
    def from_readings(
        cls, tick: int, timestamp: datetime, readings: List[FieldReading]
    ) -> "Sample":
        """Build a sample from the field readings of one tick."""
        sample = cls(tick=tick, timestamp=timestamp.replace(microsecond=0))
        for reading in readings:
            if reading.field not in METRIC_COLUMNS:
                raise ValueError(f"Unknown metric field: {reading.field}")
            setattr(sample, reading.field, reading.value)
        return sample

    @property
    def timestamp_str(self) -> str:
        return self.timestamp.strftime(TIMESTAMP_FORMAT)

    def to_row(self) -> List[str]:
        """Render the sample as the four CSV cells, substituting N/A."""
        return [
            self.timestamp_str,
            format_metric(self.cpu_frequency_mhz),
            format_metric(self.cpu_usage_pct),
            format_metric(self.memory_usage_pct),
        ]

    def to_record(self) -> dict:
        """Column-keyed record used to build polars frames."""
        return {
            TIME_COLUMN: self.timestamp_str,
            FREQUENCY_COLUMN: self.cpu_frequency_mhz,
            CPU_USAGE_COLUMN: self.cpu_usage_pct,
            MEMORY_USAGE_COLUMN: self.memory_usage_pct,
        }


def format_metric(value: Optional[Number]) -> str:
    """Format a metric for CSV/console output; None becomes ``N/A``."""
    if value is None:
        return MISSING_TOKEN
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def round_half_up(value: Number, places: int = 2) -> Number:
    """
    Round to ``places`` decimals with half-up semantics on the decimal value.

    ``round()`` works on the binary float, so ``round(12.345, 2)`` yields
    12.34; readings are rounded the way they read instead. With ``places=0``
    an int is returned.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)
