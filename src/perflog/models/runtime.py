"""
Runtime data models.

This module contains the data structures used while a run is in progress:
the generated file paths and the explicit run context passed to the loop.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

from .sample import Sample

if TYPE_CHECKING:
    from ..storage.base import SampleSink


@dataclass
class RunPaths:
    """
    A container for all generated file paths of a single run.
    """

    # The CSV file the samples are appended to.
    output_csv_file: Path

    @property
    def summary_json_file(self) -> Path:
        return self.output_csv_file.with_name(f"{self.output_csv_file.stem}_summary.json")

    @property
    def parquet_file(self) -> Path:
        return self.output_csv_file.with_suffix(".parquet")


@dataclass
class RunContext:
    """
    Encapsulates all state of one sampler run.

    The loop reads and mutates this object instead of relying on module
    globals; it is created when the run starts and handed to finalization.
    """

    # --- Schedule ---
    total_ticks: int
    interval_seconds: float
    flush_batch_size: int
    start_monotonic: float
    start_wall: datetime

    # --- Output ---
    sink: "SampleSink"

    # --- Cancellation ---
    stop_event: threading.Event = field(default_factory=threading.Event)

    # --- Progress ---
    nominal_frequency_mhz: Optional[float] = None
    buffer: List[Sample] = field(default_factory=list)
    ticks_completed: int = 0
    rows_flushed: int = 0
    interrupted: bool = False

    def target_time(self, tick: int) -> float:
        """Monotonic time at which ``tick`` (1-based) is due to end."""
        return self.start_monotonic + tick * self.interval_seconds

    @property
    def stop_requested(self) -> bool:
        return self.stop_event.is_set()
