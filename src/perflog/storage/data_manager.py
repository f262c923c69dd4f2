"""
Run artifact manager.

Writes the optional files that accompany a finished run: a JSON summary of
the statistics and a Parquet copy of the samples.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import polars as pl

from ..models.config import StorageConfig
from ..models.results import SummaryStats
from ..models.runtime import RunPaths
from ..validation import handle_file_error

logger = logging.getLogger(__name__)


class DataStorageManager:
    """
    Saves the artifacts of a finished run next to its CSV file.

    Artifact failures are logged and do not affect the CSV file, which is
    already complete when this runs.
    """

    def __init__(self, paths: RunPaths, storage_config: Optional[StorageConfig] = None):
        """
        Initialize the data storage manager.

        Args:
            paths: Paths of the run
            storage_config: Which artifacts to write; defaults apply if None
        """
        self.paths = paths
        self.storage_config = storage_config or StorageConfig()
        logger.debug(
            f"Initialized DataStorageManager with {self.storage_config.to_dict()}"
        )

    def save_run_artifacts(self, stats: SummaryStats, samples: pl.DataFrame) -> Dict[str, Path]:
        """
        Write every enabled artifact.

        Returns:
            Mapping of artifact name to the path written.
        """
        written: Dict[str, Path] = {}

        if self.storage_config.write_summary_json:
            path = self.paths.summary_json_file
            if self._save_dict(stats.to_dict(), path):
                written["summary_json"] = path

        if self.storage_config.parquet_copy:
            path = self.paths.parquet_file
            if self._save_dataframe(samples, path):
                written["parquet"] = path

        return written

    def _save_dict(self, data: Dict[str, Any], path: Path) -> bool:
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except (OSError, TypeError) as e:
            handle_file_error(e, f"writing summary {path}", reraise=False, logger=logger)
            return False
        logger.info(f"Saved run summary to: {path}")
        return True

    def _save_dataframe(self, df: pl.DataFrame, path: Path) -> bool:
        try:
            df.write_parquet(path, compression=self.storage_config.compression)
        except Exception as e:
            handle_file_error(e, f"writing Parquet copy {path}", reraise=False, logger=logger)
            return False
        logger.info(f"Saved Parquet copy with {len(df)} rows to: {path}")
        return True
