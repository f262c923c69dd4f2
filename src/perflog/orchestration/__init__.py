"""
Process-level orchestration of sampler runs.
"""

from .signal_handler import SignalHandler

__all__ = [
    "SignalHandler",
]
