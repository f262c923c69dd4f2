"""
CSV sink implementation using Polars for rendering and reading back rows.
"""

import logging
from pathlib import Path
from typing import IO, Optional, Sequence

import polars as pl

from ..models.sample import (
    CPU_USAGE_COLUMN,
    CSV_HEADER,
    FREQUENCY_COLUMN,
    MEMORY_USAGE_COLUMN,
    MISSING_TOKEN,
    TIME_COLUMN,
    Sample,
)
from ..validation import SinkUnavailableError
from .base import SampleSink

logger = logging.getLogger(__name__)

# Upper bound on "<prefix>_<n>.csv" candidates tried before giving up.
MAX_NAME_ATTEMPTS = 10000

READ_SCHEMA = {
    TIME_COLUMN: pl.Utf8,
    FREQUENCY_COLUMN: pl.Float64,
    CPU_USAGE_COLUMN: pl.Float64,
    MEMORY_USAGE_COLUMN: pl.Float64,
}


def candidate_filenames(prefix: str):
    """Yield ``<prefix>.csv``, ``<prefix>_1.csv``, ``<prefix>_2.csv``, ..."""
    yield f"{prefix}.csv"
    for n in range(1, MAX_NAME_ATTEMPTS):
        yield f"{prefix}_{n}.csv"


def render_rows(samples: Sequence[Sample]) -> str:
    """
    Render samples as CSV data lines (no header).

    Every cell is rendered to its final text first, so the output always has
    four fields per line and ``N/A`` for missing metrics.
    """
    frame = pl.DataFrame(
        [sample.to_row() for sample in samples],
        schema={column: pl.Utf8 for column in CSV_HEADER},
        orient="row",
    )
    return frame.write_csv(include_header=False)


class CsvSampleSink(SampleSink):
    """
    Append-only CSV file with collision-avoiding naming.

    The file is created with exclusive-create semantics: an existing file is
    never opened for writing, so earlier runs are never truncated. The handle
    stays open for the whole run and is flushed after every batch.
    """

    def __init__(self, directory: Path, prefix: str):
        """
        Initialize the CSV sink.

        Args:
            directory: Directory the file is created in (created if needed)
            prefix: File name stem
        """
        self.directory = Path(directory)
        self.prefix = prefix
        self._path: Optional[Path] = None
        self._handle: Optional[IO[str]] = None
        self.rows_written = 0

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def open(self) -> Path:
        if self._handle is not None:
            return self._path

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create output directory {self.directory}: {e}")
            raise SinkUnavailableError(
                f"Cannot create output directory {self.directory}: {e}",
                path=str(self.directory),
            ) from e

        for name in candidate_filenames(self.prefix):
            candidate = self.directory / name
            try:
                handle = open(candidate, "x", encoding="utf-8", newline="")
            except FileExistsError:
                logger.debug(f"{candidate} exists, trying next name")
                continue
            except OSError as e:
                logger.error(f"Cannot create output file {candidate}: {e}")
                raise SinkUnavailableError(
                    f"Cannot create output file {candidate}: {e}", path=str(candidate)
                ) from e

            self._handle = handle
            self._path = candidate
            break
        else:
            raise SinkUnavailableError(
                f"No free file name for prefix '{self.prefix}' in {self.directory}",
                path=str(self.directory),
            )

        try:
            self._handle.write(",".join(CSV_HEADER) + "\n")
            self._handle.flush()
        except OSError as e:
            self.close()
            raise SinkUnavailableError(
                f"Cannot write header to {self._path}: {e}", path=str(self._path)
            ) from e

        logger.info(f"Writing samples to: {self._path}")
        return self._path

    def append_samples(self, samples: Sequence[Sample]) -> int:
        if not samples:
            return 0
        if self._handle is None:
            raise SinkUnavailableError("CSV sink is not open", path=str(self._path))

        # One write call per batch.
        text = render_rows(samples)
        try:
            self._handle.write(text)
            self._handle.flush()
        except OSError as e:
            logger.error(f"Failed to append {len(samples)} rows to {self._path}: {e}")
            raise SinkUnavailableError(
                f"Failed to append rows to {self._path}: {e}", path=str(self._path)
            ) from e

        self.rows_written += len(samples)
        logger.debug(f"Flushed {len(samples)} rows to {self._path}")
        return len(samples)

    def read_back(self) -> pl.DataFrame:
        if self._path is None:
            raise SinkUnavailableError("CSV sink was never opened")
        if self._handle is not None:
            self._handle.flush()
        try:
            return pl.read_csv(
                self._path,
                schema=READ_SCHEMA,
                null_values=MISSING_TOKEN,
            )
        except Exception as e:
            logger.error(f"Failed to read back {self._path}: {e}")
            raise SinkUnavailableError(
                f"Failed to read back {self._path}: {e}", path=str(self._path)
            ) from e

    def close(self) -> None:
        if self._handle is None:
            return
        try:
            self._handle.close()
            logger.debug(f"Closed {self._path} after {self.rows_written} rows")
        except OSError as e:
            logger.error(f"Failed to close {self._path}: {e}")
            raise SinkUnavailableError(
                f"Failed to close {self._path}: {e}", path=str(self._path)
            ) from e
        finally:
            self._handle = None
