"""
Configuration validation utilities.

This module turns the raw TOML tables into validated configuration models.
Every key is optional; absent keys take the defaults of the models.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict

from ..models.config import (
    AppConfig,
    OutputConfig,
    SamplerConfig,
    StorageConfig,
    compute_total_ticks,
)
from ..validation import (
    ValidationError,
    validate_bool,
    validate_enum_choice,
    validate_output_prefix,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

METRICS_SOURCES = ["psutil"]
COMPRESSION_CHOICES = ["snappy", "gzip", "brotli", "lz4", "zstd"]


def validate_sampler_config(sampler_data: Dict[str, Any]) -> SamplerConfig:
    """
    Validate and create a SamplerConfig from the `[sampler]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = SamplerConfig()
    try:
        interval_seconds = validate_positive_float(
            sampler_data.get("interval_seconds", defaults.interval_seconds),
            min_value=0.01,  # 10ms minimum
            max_value=86400.0,
            field_name="sampler.interval_seconds",
        )

        duration_seconds = validate_positive_float(
            sampler_data.get("duration_seconds", defaults.duration_seconds),
            min_value=interval_seconds,
            field_name="sampler.duration_seconds",
        )

        flush_batch_size = validate_positive_integer(
            sampler_data.get("flush_batch_size", defaults.flush_batch_size),
            min_value=1,
            max_value=100000,
            field_name="sampler.flush_batch_size",
        )

        metrics_source = validate_enum_choice(
            sampler_data.get("metrics_source", defaults.metrics_source),
            choices=METRICS_SOURCES,
            field_name="sampler.metrics_source",
        )

    except ValidationError as e:
        logger.error(f"Sampler configuration validation failed: {e}")
        raise

    config = SamplerConfig(
        duration_seconds=duration_seconds,
        interval_seconds=interval_seconds,
        flush_batch_size=flush_batch_size,
        metrics_source=metrics_source,
    )

    ticks = compute_total_ticks(duration_seconds, interval_seconds)
    if Decimal(str(duration_seconds)) % Decimal(str(interval_seconds)) != 0:
        logger.warning(
            f"sampler.duration_seconds ({duration_seconds}) is not a multiple of "
            f"sampler.interval_seconds ({interval_seconds}); running {ticks} ticks"
        )
    return config


def validate_output_config(output_data: Dict[str, Any]) -> OutputConfig:
    """
    Validate and create an OutputConfig from the `[output]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = OutputConfig()

    directory = output_data.get("directory", str(defaults.directory))
    if not isinstance(directory, (str, Path)) or not str(directory).strip():
        raise ValidationError(
            "output.directory must be a non-empty path",
            field_name="output.directory",
            value=directory,
        )

    prefix = validate_output_prefix(
        output_data.get("prefix", defaults.prefix),
        field_name="output.prefix",
    )

    return OutputConfig(directory=Path(directory).expanduser(), prefix=prefix)


def validate_storage_config(storage_data: Dict[str, Any]) -> StorageConfig:
    """
    Validate and create a StorageConfig from the `[storage]` table.

    Raises:
        ValidationError: If validation fails
    """
    defaults = StorageConfig()

    write_summary_json = validate_bool(
        storage_data.get("write_summary_json", defaults.write_summary_json),
        field_name="storage.write_summary_json",
    )
    parquet_copy = validate_bool(
        storage_data.get("parquet_copy", defaults.parquet_copy),
        field_name="storage.parquet_copy",
    )
    compression = validate_enum_choice(
        storage_data.get("compression", defaults.compression),
        choices=COMPRESSION_CHOICES,
        field_name="storage.compression",
    )

    return StorageConfig(
        write_summary_json=write_summary_json,
        parquet_copy=parquet_copy,
        compression=compression,
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """Validate all tables of the main configuration file."""
    return AppConfig(
        sampler=validate_sampler_config(config_data.get("sampler", {})),
        output=validate_output_config(config_data.get("output", {})),
        storage=validate_storage_config(config_data.get("storage", {})),
    )
