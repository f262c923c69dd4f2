"""
End-of-run statistics.

Statistics are computed per metric column over the rows where that metric is
present. A column without any present value yields a FieldStats with no
numbers instead of dividing by zero.
"""

import logging
from pathlib import Path
from typing import Optional

import polars as pl

from ..models.results import FieldStats, SummaryStats
from ..models.sample import METRIC_COLUMNS

logger = logging.getLogger(__name__)


def compute_field_stats(frame: pl.DataFrame, field: str) -> FieldStats:
    """
    Aggregate one metric column of a run.

    Args:
        frame: Rows of the run as read back from the sink
        field: Sample attribute name of the metric

    Returns:
        FieldStats over the non-null values of the column.
    """
    column = METRIC_COLUMNS[field]
    total_count = frame.height
    if column in frame.columns:
        values = frame.get_column(column).drop_nulls()
    else:
        values = pl.Series(column, [], dtype=pl.Float64)
    valid_count = values.len()

    if valid_count == 0:
        return FieldStats(field=field, valid_count=0, total_count=total_count)

    return FieldStats(
        field=field,
        valid_count=valid_count,
        total_count=total_count,
        average=float(values.mean()),
        minimum=float(values.min()),
        maximum=float(values.max()),
    )


def compute_summary_stats(
    frame: pl.DataFrame,
    total_ticks: int,
    interrupted: bool = False,
    output_file: Optional[Path] = None,
    ticks_completed: Optional[int] = None,
) -> SummaryStats:
    """
    Aggregate every metric column of a run into a SummaryStats.

    ``ticks_completed`` is the number of ticks the loop ran; it defaults to
    the number of persisted rows. Per-field counts always describe the
    persisted rows.
    """
    field_stats = {field: compute_field_stats(frame, field) for field in METRIC_COLUMNS}
    return SummaryStats(
        ticks_completed=frame.height if ticks_completed is None else ticks_completed,
        total_ticks=total_ticks,
        interrupted=interrupted,
        output_file=output_file,
        **field_stats,
    )
