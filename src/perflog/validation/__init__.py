"""
Validation and error handling for the perflog package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    SinkUnavailableError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
)
from .validators import (
    validate_bool,
    validate_enum_choice,
    validate_output_prefix,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Core functionality
    "ErrorSeverity",
    "SinkUnavailableError",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_cli_error",
    # Validators
    "validate_bool",
    "validate_enum_choice",
    "validate_output_prefix",
    "validate_positive_float",
    "validate_positive_integer",
]
