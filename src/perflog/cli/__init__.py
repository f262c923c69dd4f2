"""
Command-line interface for the perflog package.

This module provides the main CLI entry point for the sampler.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
