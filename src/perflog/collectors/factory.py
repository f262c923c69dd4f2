"""
Factory for creating metrics source instances.
"""

import logging

from .base import AbstractMetricsSource
from .psutil_source import PsutilMetricsSource

logger = logging.getLogger(__name__)


def create_metrics_source(source_type: str = "psutil") -> AbstractMetricsSource:
    """
    Create a metrics source based on the configured type.

    Args:
        source_type: Source implementation name ('psutil')

    Returns:
        AbstractMetricsSource instance

    Raises:
        ValueError: If an unsupported source type is specified
    """
    if source_type == "psutil":
        logger.debug("Creating PsutilMetricsSource")
        return PsutilMetricsSource()
    raise ValueError(f"Unsupported metrics source: {source_type}")
