"""
Tests for turning the raw TOML tables into configuration models.
"""

import logging
from pathlib import Path

import pytest

from perflog.config import (
    validate_app_config,
    validate_output_config,
    validate_sampler_config,
    validate_storage_config,
)
from perflog.validation import ValidationError


@pytest.mark.unit
class TestValidateSamplerConfig:
    """Test cases for validate_sampler_config."""

    def test_defaults(self):
        config = validate_sampler_config({})
        assert config.duration_seconds == 600.0
        assert config.interval_seconds == 5.0
        assert config.flush_batch_size == 10
        assert config.metrics_source == "psutil"
        assert config.total_ticks == 120

    def test_valid_values(self):
        config = validate_sampler_config(
            {"duration_seconds": 20, "interval_seconds": 5, "flush_batch_size": 2}
        )
        assert config.total_ticks == 4
        assert config.flush_batch_size == 2

    @pytest.mark.parametrize("interval", [0, -1, "fast", True, float("nan"), float("inf")])
    def test_invalid_interval(self, interval):
        with pytest.raises(ValidationError) as exc_info:
            validate_sampler_config({"interval_seconds": interval})
        assert exc_info.value.field_name == "sampler.interval_seconds"

    def test_duration_shorter_than_interval(self):
        with pytest.raises(ValidationError):
            validate_sampler_config({"duration_seconds": 3, "interval_seconds": 5})

    @pytest.mark.parametrize("duration", [float("inf"), float("nan")])
    def test_non_finite_duration(self, duration):
        with pytest.raises(ValidationError) as exc_info:
            validate_sampler_config({"duration_seconds": duration, "interval_seconds": 5})
        assert exc_info.value.field_name == "sampler.duration_seconds"

    @pytest.mark.parametrize("batch", [0, 2.5, "ten"])
    def test_invalid_batch_size(self, batch):
        with pytest.raises(ValidationError):
            validate_sampler_config({"flush_batch_size": batch})

    def test_unknown_metrics_source(self):
        with pytest.raises(ValidationError):
            validate_sampler_config({"metrics_source": "wmi"})

    def test_non_multiple_duration_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = validate_sampler_config({"duration_seconds": 22, "interval_seconds": 5})
        assert config.total_ticks == 4
        assert "not a multiple" in caplog.text

    def test_fractional_multiple_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = validate_sampler_config({"duration_seconds": 1.0, "interval_seconds": 0.1})
        assert config.total_ticks == 10
        assert "not a multiple" not in caplog.text


@pytest.mark.unit
class TestValidateOutputAndStorage:
    """Test cases for the output and storage tables."""

    def test_output_defaults(self):
        config = validate_output_config({})
        assert config.directory == Path(".")
        assert config.prefix == "system_performance_log"

    def test_output_values(self, temp_dir):
        config = validate_output_config({"directory": str(temp_dir), "prefix": "node-7.log"})
        assert config.directory == temp_dir
        assert config.prefix == "node-7.log"

    @pytest.mark.parametrize("prefix", ["", "a/b", "..", "has space"])
    def test_invalid_prefix(self, prefix):
        with pytest.raises(ValidationError):
            validate_output_config({"prefix": prefix})

    def test_invalid_directory(self):
        with pytest.raises(ValidationError):
            validate_output_config({"directory": ""})

    def test_storage_defaults(self):
        config = validate_storage_config({})
        assert config.write_summary_json is True
        assert config.parquet_copy is False
        assert config.compression == "snappy"

    def test_storage_rejects_non_bool(self):
        with pytest.raises(ValidationError):
            validate_storage_config({"parquet_copy": "yes"})

    def test_storage_rejects_unknown_compression(self):
        with pytest.raises(ValidationError):
            validate_storage_config({"compression": "rar"})

    def test_app_config(self, sample_config_data, temp_dir):
        config = validate_app_config(sample_config_data)
        assert config.sampler.total_ticks == 4
        assert config.output.directory == temp_dir / "out"
        assert config.output.prefix == "test_log"
        assert config.storage.write_summary_json is True
