"""
Metrics source implementation using the 'psutil' library.

CPU utilization uses ``psutil.cpu_percent(interval=None)``, which reports
the utilization averaged over the time since the previous call. Called once
per tick, each reading therefore covers the preceding tick. The CPU frequency
is an instantaneous reading of the current clock.
"""

import logging
from typing import Optional

import psutil

from ..models.sample import round_half_up
from .base import AbstractMetricsSource

logger = logging.getLogger(__name__)


class PsutilMetricsSource(AbstractMetricsSource):
    """
    Reads CPU frequency, CPU utilization and memory utilization with psutil.

    The nominal frequency is the maximum clock reported by
    ``psutil.cpu_freq()``, or the current clock on platforms that report no
    maximum. psutil reports the current clock in MHz, which already is the
    nominal clock times the performance ratio, so the dynamic frequency is
    read directly; the nominal value only gates whether it is queried.
    """

    name = "psutil"

    def __init__(self, prime_cpu_percent: bool = True):
        """
        Initializes the PsutilMetricsSource.

        Args:
            prime_cpu_percent: Call ``cpu_percent`` once so that the first
                tick reports utilization since construction instead of 0.0.
        """
        if prime_cpu_percent:
            try:
                psutil.cpu_percent(interval=None)
            except Exception as e:
                logger.warning(f"Could not prime CPU utilization counter: {e}")
        logger.debug("Initialized PsutilMetricsSource")

    def read_nominal_frequency(self) -> Optional[float]:
        freq = psutil.cpu_freq()
        if freq is None:
            return None
        nominal = freq.max if freq.max and freq.max > 0 else freq.current
        if not nominal or nominal <= 0:
            return None
        return float(nominal)

    def read_dynamic_frequency(self, nominal: float) -> Optional[int]:
        freq = psutil.cpu_freq()
        if freq is None or not freq.current:
            return None
        return round_half_up(freq.current, 0)

    def read_cpu_usage_pct(self) -> Optional[float]:
        return round_half_up(psutil.cpu_percent(interval=None), 2)

    def read_memory_usage_pct(self) -> Optional[float]:
        memory = psutil.virtual_memory()
        if memory.total <= 0:
            return None
        return round_half_up(100 * (1 - memory.available / memory.total), 2)
