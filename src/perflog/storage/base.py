"""
Abstract base class for sample sinks.

A sink is the append-only destination of a run. It is opened once, receives
batches of samples in tick order, can be read back for finalization and must
be closeable on every exit path; sinks are context managers for that reason.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence

import polars as pl

from ..models.sample import Sample
from ..validation import SinkUnavailableError

logger = logging.getLogger(__name__)


class SampleSink(ABC):
    """Abstract base class for sample sink implementations."""

    @abstractmethod
    def open(self) -> Path:
        """
        Acquire the destination and write any header.

        Returns:
            The path of the destination.

        Raises:
            SinkUnavailableError: If the destination cannot be created.
        """

    @abstractmethod
    def append_samples(self, samples: Sequence[Sample]) -> int:
        """
        Durably append a batch of samples, in order.

        Either every row of the batch is written or none is.

        Returns:
            Number of rows written.

        Raises:
            SinkUnavailableError: If the write fails.
        """

    @abstractmethod
    def read_back(self) -> pl.DataFrame:
        """
        Load every row written so far, with missing values as nulls.

        Raises:
            SinkUnavailableError: If the destination cannot be read.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the destination. Calling it twice is harmless."""

    @property
    @abstractmethod
    def path(self) -> Optional[Path]:
        """Path of the destination once opened, else None."""

    def __enter__(self) -> "SampleSink":
        if self.path is None:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        # An exception is already propagating; a close failure must not replace it.
        try:
            self.close()
        except SinkUnavailableError as e:
            logger.error(f"Failed to close sink while handling {exc_type.__name__}: {e}")
