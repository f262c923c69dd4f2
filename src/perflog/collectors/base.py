"""
Defines the abstract metrics source used by the sampler loop.

This module provides:
- AbstractMetricsSource: the capability surface the loop depends on. Each
  reading is independently callable and independently fallible.
- collect_field: turns one raw reading (a number, None, or a raised
  exception) into a FieldReading, applying the plausibility range of the
  field.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from ..models.sample import FieldReading, Number

logger = logging.getLogger(__name__)

FREQUENCY_FIELD = "cpu_frequency_mhz"
CPU_USAGE_FIELD = "cpu_usage_pct"
MEMORY_USAGE_FIELD = "memory_usage_pct"

# Human-readable names used in progress lines and warnings.
FIELD_LABELS = {
    FREQUENCY_FIELD: "CPU frequency",
    CPU_USAGE_FIELD: "CPU usage",
    MEMORY_USAGE_FIELD: "memory usage",
}

NOMINAL_UNAVAILABLE = "nominal CPU frequency unavailable"


def collect_field(
    field: str,
    reader: Callable[..., Optional[Number]],
    *args: Any,
    lower: Optional[float] = None,
    upper: Optional[float] = None,
    lower_inclusive: bool = True,
) -> FieldReading:
    """
    Query one metric and wrap the outcome.

    The reader may return a number, return None for "unavailable", or raise.
    Values outside ``[lower, upper]`` (or not finite) are treated as
    unavailable. Exceptions never escape this function.

    Args:
        field: Sample attribute the reading belongs to.
        reader: Callable producing the raw reading.
        *args: Positional arguments for the reader.
        lower: Smallest plausible value, None for no bound.
        upper: Largest plausible value, None for no bound.
        lower_inclusive: Whether ``lower`` itself is plausible.

    Returns:
        FieldReading.present or FieldReading.missing.
    """
    try:
        value = reader(*args)
    except Exception as e:
        logger.debug(f"Reading {field} raised {type(e).__name__}", exc_info=True)
        return FieldReading.missing(field, f"{type(e).__name__}: {e}")

    if value is None:
        return FieldReading.missing(field, "source reported no value")

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return FieldReading.missing(field, f"non-numeric value {value!r}")

    if not math.isfinite(value):
        return FieldReading.missing(field, f"non-finite value {value}")

    if lower is not None and (value < lower or (not lower_inclusive and value == lower)):
        return FieldReading.missing(field, f"value {value} out of range")

    if upper is not None and value > upper:
        return FieldReading.missing(field, f"value {value} out of range")

    return FieldReading.present(field, value)


class AbstractMetricsSource(ABC):
    """
    Abstract base class for host metrics sources.

    Subclasses implement the four ``read_*`` methods; each may return None or
    raise when the reading is unavailable. The loop only calls the
    ``sample_*`` methods, which never raise.
    """

    name: str = "abstract"

    @abstractmethod
    def read_nominal_frequency(self) -> Optional[float]:
        """
        Return the rated (base) CPU clock in MHz.

        Queried once when a run starts and used as the scaling base of the
        dynamic frequency.
        """

    @abstractmethod
    def read_dynamic_frequency(self, nominal: float) -> Optional[int]:
        """
        Return the current CPU clock in MHz.

        The nominal clock scaled by the current performance ratio, rounded
        to a whole MHz.
        """

    @abstractmethod
    def read_cpu_usage_pct(self) -> Optional[float]:
        """Return CPU utilization in percent, rounded to 2 decimals."""

    @abstractmethod
    def read_memory_usage_pct(self) -> Optional[float]:
        """Return memory utilization in percent, rounded to 2 decimals."""

    def describe(self) -> str:
        """Short description of the source for log messages."""
        return self.__class__.__name__

    # --- Wrapped readings used by the sampler loop ---

    def sample_nominal_frequency(self) -> FieldReading:
        return collect_field(
            FREQUENCY_FIELD, self.read_nominal_frequency, lower=0, lower_inclusive=False
        )

    def sample_frequency(self, nominal: Optional[float]) -> FieldReading:
        # Without a scaling base the dynamic reading is not attempted.
        if nominal is None:
            return FieldReading.missing(FREQUENCY_FIELD, NOMINAL_UNAVAILABLE)
        return collect_field(
            FREQUENCY_FIELD,
            self.read_dynamic_frequency,
            nominal,
            lower=0,
            lower_inclusive=False,
        )

    def sample_cpu_usage(self) -> FieldReading:
        return collect_field(CPU_USAGE_FIELD, self.read_cpu_usage_pct, lower=0, upper=100)

    def sample_memory_usage(self) -> FieldReading:
        return collect_field(
            MEMORY_USAGE_FIELD, self.read_memory_usage_pct, lower=0, upper=100
        )

    def sample_all(self, nominal: Optional[float]) -> List[FieldReading]:
        """Query the three per-tick metrics, in CSV column order."""
        return [
            self.sample_frequency(nominal),
            self.sample_cpu_usage(),
            self.sample_memory_usage(),
        ]
