"""
Run summary data models.

This module defines the end-of-run statistics. Statistics are computed per
metric over the ticks where that metric was present; a metric that was never
present reports "no valid data" instead of a number.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class FieldStats:
    """
    Aggregate of one metric over a run.

    ``average``, ``minimum`` and ``maximum`` are None when ``valid_count`` is
    zero.
    """

    field: str
    valid_count: int
    total_count: int
    average: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return self.valid_count > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "average": self.average,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "valid_count": self.valid_count,
            "total_count": self.total_count,
        }


@dataclass
class SummaryStats:
    """
    Result of a sampler run.

    Attributes:
        cpu_frequency_mhz: Statistics of the CPU frequency column.
        cpu_usage_pct: Statistics of the CPU utilization column.
        memory_usage_pct: Statistics of the memory utilization column.
        ticks_completed: Number of ticks the loop ran.
        total_ticks: Number of ticks the run was scheduled for.
        interrupted: True when the run stopped before its last tick.
        output_file: The CSV file the run was written to.
    """

    cpu_frequency_mhz: FieldStats
    cpu_usage_pct: FieldStats
    memory_usage_pct: FieldStats
    ticks_completed: int
    total_ticks: int
    interrupted: bool = False
    output_file: Optional[Path] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def fields(self) -> Dict[str, FieldStats]:
        return {
            "cpu_frequency_mhz": self.cpu_frequency_mhz,
            "cpu_usage_pct": self.cpu_usage_pct,
            "memory_usage_pct": self.memory_usage_pct,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticks_completed": self.ticks_completed,
            "total_ticks": self.total_ticks,
            "interrupted": self.interrupted,
            "output_file": str(self.output_file) if self.output_file else None,
            "fields": {name: stats.to_dict() for name, stats in self.fields.items()},
            "metadata": dict(self.metadata),
        }
