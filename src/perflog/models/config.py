"""
Configuration data models.

This module contains the configuration data structures for the sampler,
the output location and the optional run artifacts.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Literal

DEFAULT_DURATION_SECONDS = 600.0
DEFAULT_INTERVAL_SECONDS = 5.0
DEFAULT_FLUSH_BATCH_SIZE = 10
DEFAULT_OUTPUT_PREFIX = "system_performance_log"

CompressionType = Literal["snappy", "gzip", "brotli", "lz4", "zstd"]


def compute_total_ticks(duration: float, interval: float) -> int:
    """
    Number of whole intervals in a duration (truncating).

    Computed on the decimal values so that e.g. 1.0 / 0.1 gives 10 ticks.
    """
    return int(Decimal(str(duration)) // Decimal(str(interval)))


@dataclass
class SamplerConfig:
    """
    Configuration for the sampling loop, loaded from the `[sampler]` table.
    """

    # Total wall-clock seconds to run.
    duration_seconds: float = DEFAULT_DURATION_SECONDS
    # Seconds between ticks.
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    # Number of buffered samples written to the CSV file at once.
    flush_batch_size: int = DEFAULT_FLUSH_BATCH_SIZE
    # Which metrics source implementation to use.
    metrics_source: str = "psutil"

    @property
    def total_ticks(self) -> int:
        """Number of ticks in a run; a partial trailing interval is dropped."""
        return compute_total_ticks(self.duration_seconds, self.interval_seconds)


@dataclass
class OutputConfig:
    """
    Where the CSV file of a run is created, loaded from the `[output]` table.
    """

    directory: Path = Path(".")
    prefix: str = DEFAULT_OUTPUT_PREFIX


@dataclass
class StorageConfig:
    """
    Configuration of the artifacts written next to the CSV file after a run.

    Attributes:
        write_summary_json: Write `<stem>_summary.json` with the run statistics.
        parquet_copy: Write a Parquet copy of the run as `<stem>.parquet`.
        compression: Compression algorithm used for the Parquet copy.
    """

    write_summary_json: bool = True
    parquet_copy: bool = False
    compression: CompressionType = "snappy"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "write_summary_json": self.write_summary_json,
            "parquet_copy": self.parquet_copy,
            "compression": self.compression,
        }


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
