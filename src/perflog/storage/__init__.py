"""
Storage module for sampler output.

This module provides:
- An append-only sink interface with guaranteed release on every exit path
- A CSV sink with collision-avoiding file naming, rendering rows with Polars
- A manager for the optional run artifacts (JSON summary, Parquet copy)
"""

from .base import SampleSink
from .csv_sink import CsvSampleSink, candidate_filenames, render_rows
from .data_manager import DataStorageManager

__all__ = [
    "SampleSink",
    "CsvSampleSink",
    "DataStorageManager",
    "candidate_filenames",
    "render_rows",
]
