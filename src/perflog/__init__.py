"""
perflog: fixed-cadence host performance sampler.

This package polls CPU frequency, CPU utilization and memory utilization at
a fixed interval, writes the samples to a CSV file in batches and reports
average/minimum/maximum per metric at the end of the run.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- collectors: Metrics sources
- storage: CSV sink and run artifacts
- sampler: The sampling loop, statistics and console report
- orchestration: Signal handling
- cli: Command-line interface

Usage:
    From command line:
        perflog [options]

    Programmatically:
        from perflog import CsvSampleSink, PsutilMetricsSource, run
        stats = run(20, 5, PsutilMetricsSource(), CsvSampleSink(Path("."), "log"))
"""

# Main interfaces
from .config import clear_config_cache, get_config, set_config_path
from .cli import main_cli
from .sampler import SamplerLoop, run

# Collaborators
from .collectors import AbstractMetricsSource, PsutilMetricsSource, create_metrics_source
from .storage import CsvSampleSink, DataStorageManager, SampleSink

# Model classes for external use
from .models import (
    AppConfig,
    FieldReading,
    FieldStats,
    RunContext,
    Sample,
    SamplerConfig,
    SummaryStats,
)

# Errors
from .validation import SinkUnavailableError, ValidationError

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "main_cli",
    "SamplerLoop",
    "run",
    # Collaborators
    "AbstractMetricsSource",
    "PsutilMetricsSource",
    "create_metrics_source",
    "CsvSampleSink",
    "DataStorageManager",
    "SampleSink",
    # Models
    "AppConfig",
    "FieldReading",
    "FieldStats",
    "RunContext",
    "Sample",
    "SamplerConfig",
    "SummaryStats",
    # Errors
    "SinkUnavailableError",
    "ValidationError",
]
