"""
Pytest configuration and shared fixtures for the perflog test suite.

This module provides common fixtures, test doubles for the metrics source
and the clocks, and configuration file helpers.
"""

import shutil
import sys
import tempfile
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from perflog.collectors.base import AbstractMetricsSource  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Test Doubles
# ============================================================================


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.start = start
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    @property
    def elapsed(self) -> float:
        return self.now - self.start


class FakeWallClock:
    """Wall clock derived from a FakeClock, starting at a fixed datetime."""

    def __init__(self, clock: FakeClock, start: datetime = datetime(2024, 3, 1, 12, 0, 0)):
        self.clock = clock
        self.start = start

    def __call__(self) -> datetime:
        return self.start + timedelta(seconds=self.clock.elapsed)


class FakeSleeper:
    """
    Records requested sleeps and advances the fake clock by them.

    ``on_sleep`` is called with the 1-based sleep number before the clock
    advances, which lets tests act "between ticks".
    """

    def __init__(self, clock: FakeClock, on_sleep: Optional[Callable[[int], None]] = None):
        self.clock = clock
        self.on_sleep = on_sleep
        self.durations: List[float] = []

    def __call__(self, seconds: float) -> bool:
        self.durations.append(seconds)
        if self.on_sleep is not None:
            self.on_sleep(len(self.durations))
        self.clock.advance(seconds)
        return False


class ScriptedMetricsSource(AbstractMetricsSource):
    """
    Metrics source driven by per-call scripts.

    Each script entry is returned as the reading of that call; an exception
    instance is raised instead, and None means "unavailable". When a script
    runs out, its last entry repeats. ``latency`` advances the fake clock on
    every tick to simulate collection time.
    """

    name = "scripted"

    def __init__(
        self,
        nominal: Any = 2400.0,
        frequency: Sequence[Any] = (2400,),
        cpu: Sequence[Any] = (10.0,),
        memory: Sequence[Any] = (50.0,),
        clock: Optional[FakeClock] = None,
        latency: Sequence[float] = (0.0,),
    ):
        self.nominal = nominal
        self.scripts = {
            "frequency": list(frequency),
            "cpu": list(cpu),
            "memory": list(memory),
            "latency": list(latency),
        }
        self.calls = {"nominal": 0, "frequency": 0, "cpu": 0, "memory": 0, "latency": 0}
        self.clock = clock

    def _next(self, key: str) -> Any:
        script = self.scripts[key]
        index = min(self.calls[key], len(script) - 1)
        self.calls[key] += 1
        value = script[index]
        if isinstance(value, BaseException):
            raise value
        return value

    def read_nominal_frequency(self):
        self.calls["nominal"] += 1
        if isinstance(self.nominal, BaseException):
            raise self.nominal
        return self.nominal

    def read_dynamic_frequency(self, nominal):
        return self._next("frequency")

    def read_cpu_usage_pct(self):
        if self.clock is not None:
            self.clock.advance(self._next("latency"))
        return self._next("cpu")

    def read_memory_usage_pct(self):
        return self._next("memory")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_wall_clock(fake_clock):
    return FakeWallClock(fake_clock)


@pytest.fixture
def fake_sleeper(fake_clock):
    return FakeSleeper(fake_clock)


@pytest.fixture
def make_sleeper(fake_clock):
    """Factory for sleepers that run a callback between ticks."""

    def _make(on_sleep: Optional[Callable[[int], None]] = None) -> FakeSleeper:
        return FakeSleeper(fake_clock, on_sleep)

    return _make


@pytest.fixture
def stop_event():
    return threading.Event()


@pytest.fixture
def scripted_source(fake_clock):
    """Source that always succeeds with constant readings."""
    return ScriptedMetricsSource(clock=fake_clock)


@pytest.fixture
def make_source(fake_clock):
    """Factory for scripted sources bound to the fake clock."""

    def _make(**kwargs) -> ScriptedMetricsSource:
        kwargs.setdefault("clock", fake_clock)
        return ScriptedMetricsSource(**kwargs)

    return _make


@pytest.fixture
def loop_kwargs(fake_clock, fake_wall_clock, fake_sleeper):
    """Clock overrides for SamplerLoop / run()."""
    return {
        "clock": fake_clock,
        "wall_clock": fake_wall_clock,
        "sleeper": fake_sleeper,
    }


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_config_data(temp_dir):
    """Sample configuration data for testing."""
    return {
        "sampler": {
            "duration_seconds": 20,
            "interval_seconds": 5,
            "flush_batch_size": 10,
            "metrics_source": "psutil",
        },
        "output": {
            "directory": str(temp_dir / "out"),
            "prefix": "test_log",
        },
        "storage": {
            "write_summary_json": True,
            "parquet_copy": False,
            "compression": "snappy",
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary config.toml."""
    import toml

    path = temp_dir / "config.toml"
    with open(path, "w") as f:
        toml.dump(sample_config_data, f)
    return path


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield  # Run the test

    from perflog.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(original_config_path)
