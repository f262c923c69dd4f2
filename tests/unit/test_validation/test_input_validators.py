"""
Tests for the validation helpers and the error handling utilities.
"""

import logging
from unittest.mock import Mock

import pytest

from perflog.validation import (
    ErrorSeverity,
    SinkUnavailableError,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_bool,
    validate_enum_choice,
    validate_output_prefix,
    validate_positive_float,
    validate_positive_integer,
)


@pytest.mark.unit
class TestValidators:
    """Test cases for the value validators."""

    def test_positive_integer(self):
        assert validate_positive_integer(5) == 5
        assert validate_positive_integer("7") == 7
        assert validate_positive_integer(3.0) == 3

    @pytest.mark.parametrize("value", [0, -1, True, 2.5, "x", None])
    def test_positive_integer_rejects(self, value):
        with pytest.raises(ValidationError):
            validate_positive_integer(value, field_name="batch")

    def test_positive_integer_max(self):
        with pytest.raises(ValidationError, match="must be <= 10"):
            validate_positive_integer(11, max_value=10)

    def test_positive_float(self):
        assert validate_positive_float("0.5", min_value=0.01) == 0.5
        with pytest.raises(ValidationError):
            validate_positive_float(0.001, min_value=0.01)
        with pytest.raises(ValidationError):
            validate_positive_float(False)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "nan", "inf"])
    def test_positive_float_rejects_non_finite(self, value):
        with pytest.raises(ValidationError, match="finite"):
            validate_positive_float(value, min_value=0.01, field_name="sampler.interval_seconds")

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_positive_integer_rejects_non_finite(self, value):
        with pytest.raises(ValidationError):
            validate_positive_integer(value, field_name="sampler.flush_batch_size")

    def test_output_prefix(self):
        assert validate_output_prefix("  run_1  ") == "run_1"
        with pytest.raises(ValidationError):
            validate_output_prefix("../escape")
        with pytest.raises(ValidationError):
            validate_output_prefix(None)

    def test_enum_choice(self):
        assert validate_enum_choice("psutil", ["psutil"]) == "psutil"
        with pytest.raises(ValidationError):
            validate_enum_choice("PSUTIL", ["psutil"])

    def test_bool(self):
        assert validate_bool(False) is False
        with pytest.raises(ValidationError):
            validate_bool(1)

    def test_validation_error_attributes(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_integer(0, field_name="sampler.flush_batch_size")
        error = exc_info.value
        assert error.field_name == "sampler.flush_batch_size"
        assert error.value == 0
        assert error.severity == ErrorSeverity.ERROR


@pytest.mark.unit
class TestErrorHandling:
    """Test cases for the error handling helpers."""

    def test_handle_error_reraises(self):
        with pytest.raises(ValueError):
            handle_error(ValueError("bad"), "testing")

    def test_handle_error_logs_at_severity(self):
        logger = Mock(spec=logging.Logger)
        handle_error(ValueError("bad"), "testing", severity="warning", reraise=False, logger=logger)
        logger.warning.assert_called_once_with("Error in testing: bad")

    def test_handle_cli_error_exits(self):
        logger = Mock(spec=logging.Logger)
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValueError("bad"), "parsing", exit_code=2, logger=logger)
        assert exc_info.value.code == 2
        logger.error.assert_called_once_with("Error in CLI parsing: bad")

    def test_sink_unavailable_error(self):
        error = SinkUnavailableError("cannot create", path="/tmp/x.csv")
        assert str(error) == "cannot create"
        assert error.path == "/tmp/x.csv"
