"""
Command-line interface for the perflog host performance sampler.

This module provides the main CLI entry point, handling command-line
arguments, configuration loading and validation, and running one sampling
run with graceful handling of SIGINT/SIGTERM.

Usage:
    perflog [--config PATH] [-d SECONDS] [-i SECONDS] [-p PREFIX] [-o DIR]

Example:
    perflog --duration 60 --interval 1 --prefix laptop_idle
"""

import argparse
import dataclasses
import logging
import sys
import threading
import tomllib
from pathlib import Path
from typing import List, Optional

from ..collectors import create_metrics_source
from ..config import (
    get_config,
    set_config_path,
    validate_output_config,
    validate_sampler_config,
)
from ..models.config import AppConfig
from ..models.runtime import RunPaths
from ..orchestration import SignalHandler
from ..sampler import run
from ..storage import CsvSampleSink, DataStorageManager
from ..validation import SinkUnavailableError, ValidationError, handle_cli_error

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 1
EXIT_SINK_ERROR = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sample CPU frequency, CPU usage and memory usage to a CSV file."
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config.toml. Defaults to conf/config.toml; built-in defaults if absent.",
    )
    parser.add_argument(
        "-d",
        "--duration",
        type=float,
        help="Total run time in seconds (overrides sampler.duration_seconds).",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        help="Seconds between samples (overrides sampler.interval_seconds).",
    )
    parser.add_argument(
        "-b",
        "--batch-size",
        type=int,
        help="Samples buffered between writes (overrides sampler.flush_batch_size).",
    )
    parser.add_argument(
        "-p",
        "--prefix",
        type=str,
        help="Output file name stem (overrides output.prefix).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        help="Directory the CSV file is created in (overrides output.directory).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Console log level.",
    )
    return parser


def apply_cli_overrides(app_config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """
    Merge command-line values over the loaded configuration.

    The merged tables go through the same validators as the file, so a CLI
    value is held to the same rules as a configured one.

    Raises:
        ValidationError: If an overridden value is invalid
    """
    sampler = app_config.sampler
    sampler_data = {
        "duration_seconds": sampler.duration_seconds if args.duration is None else args.duration,
        "interval_seconds": sampler.interval_seconds if args.interval is None else args.interval,
        "flush_batch_size": sampler.flush_batch_size if args.batch_size is None else args.batch_size,
        "metrics_source": sampler.metrics_source,
    }
    output = app_config.output
    output_data = {
        "directory": str(output.directory if args.output_dir is None else args.output_dir),
        "prefix": output.prefix if args.prefix is None else args.prefix,
    }
    return dataclasses.replace(
        app_config,
        sampler=validate_sampler_config(sampler_data),
        output=validate_output_config(output_data),
    )


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for perflog.

    Loads the configuration, applies command-line overrides, runs the
    sampler and writes the run artifacts.

    Raises:
        SystemExit: 1 on configuration errors or an aborted run, 2 when the
            output file cannot be written, 130 when the run was interrupted.
    """
    args = build_parser().parse_args(argv)
    logging.getLogger().setLevel(getattr(logging, args.log_level))

    if args.config is not None:
        set_config_path(args.config)

    # Load application configuration
    try:
        app_config = apply_cli_overrides(get_config(), args)
    except (ValidationError, FileNotFoundError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=EXIT_CONFIG_ERROR,
            include_traceback=False,
            logger=logger,
        )

    sampler_config = app_config.sampler
    logger.info(
        f"Sampling for {sampler_config.duration_seconds}s every "
        f"{sampler_config.interval_seconds}s ({sampler_config.total_ticks} samples)"
    )

    metrics_source = create_metrics_source(sampler_config.metrics_source)
    sink = CsvSampleSink(app_config.output.directory, app_config.output.prefix)
    stop_event = threading.Event()

    try:
        with SignalHandler(stop_event):
            stats = run(
                duration=sampler_config.duration_seconds,
                interval=sampler_config.interval_seconds,
                metrics_source=metrics_source,
                sink=sink,
                flush_batch_size=sampler_config.flush_batch_size,
                stop_event=stop_event,
            )
    except SinkUnavailableError as e:
        handle_cli_error(
            error=e,
            context="writing samples",
            exit_code=EXIT_SINK_ERROR,
            include_traceback=False,
            logger=logger,
        )
    except Exception as e:
        handle_cli_error(
            error=e,
            context="sampling",
            exit_code=EXIT_CONFIG_ERROR,
            include_traceback=True,
            logger=logger,
        )

    # The CSV file is complete at this point; artifacts are best-effort.
    try:
        samples = sink.read_back()
    except SinkUnavailableError as e:
        logger.warning(f"Skipping run artifacts: {e}")
    else:
        manager = DataStorageManager(RunPaths(output_csv_file=sink.path), app_config.storage)
        manager.save_run_artifacts(stats, samples)

    if stats.interrupted:
        logger.info("Sampling was terminated before the last tick.")
        sys.exit(EXIT_INTERRUPTED)

    logger.info("Sampling completed.")


if __name__ == "__main__":
    main_cli()
