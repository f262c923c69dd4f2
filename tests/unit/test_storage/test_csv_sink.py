"""
Tests for the CSV sample sink.
"""

from datetime import datetime

import pytest

from perflog.models import CSV_HEADER, Sample
from perflog.storage import CsvSampleSink
from perflog.validation import SinkUnavailableError


def make_sample(tick, frequency=2400, cpu=12.5, memory=48.25):
    return Sample(
        tick=tick,
        timestamp=datetime(2024, 3, 1, 12, 0, 5 * tick),
        cpu_frequency_mhz=frequency,
        cpu_usage_pct=cpu,
        memory_usage_pct=memory,
    )


def read_lines(path):
    return path.read_text(encoding="utf-8").splitlines()


@pytest.mark.unit
class TestCsvSampleSink:
    """Test cases for CsvSampleSink."""

    def test_open_writes_header(self, temp_dir):
        sink = CsvSampleSink(temp_dir, "log")
        path = sink.open()
        sink.close()

        assert path == temp_dir / "log.csv"
        assert read_lines(path) == ["Time,CPUSpeed(MHz),CPUUsage(%),MemoryUsage(%)"]

    def test_creates_missing_directory(self, temp_dir):
        target = temp_dir / "nested" / "out"
        with CsvSampleSink(target, "log") as sink:
            assert sink.path == target / "log.csv"
        assert (target / "log.csv").exists()

    def test_collision_naming_never_overwrites(self, temp_dir):
        (temp_dir / "log.csv").write_text("earlier run\n")
        (temp_dir / "log_1.csv").write_text("another run\n")

        with CsvSampleSink(temp_dir, "log") as sink:
            sink.append_samples([make_sample(1)])
            path = sink.path

        assert path == temp_dir / "log_2.csv"
        assert (temp_dir / "log.csv").read_text() == "earlier run\n"
        assert (temp_dir / "log_1.csv").read_text() == "another run\n"

    def test_rows_have_four_fields(self, temp_dir):
        samples = [
            make_sample(1),
            make_sample(2, frequency=None, cpu=None, memory=None),
            make_sample(3, cpu=None),
        ]
        with CsvSampleSink(temp_dir, "log") as sink:
            assert sink.append_samples(samples) == 3
            path = sink.path

        lines = read_lines(path)
        assert len(lines) == 4
        assert lines[1] == "2024-03-01 12:00:05,2400,12.50,48.25"
        assert lines[2] == "2024-03-01 12:00:10,N/A,N/A,N/A"
        assert lines[3] == "2024-03-01 12:00:15,2400,N/A,48.25"
        assert all(len(line.split(",")) == len(CSV_HEADER) for line in lines)

    def test_batches_append_in_order(self, temp_dir):
        with CsvSampleSink(temp_dir, "log") as sink:
            sink.append_samples([make_sample(1), make_sample(2)])
            sink.append_samples([make_sample(3)])
            assert sink.rows_written == 3
            path = sink.path

        times = [line.split(",")[0] for line in read_lines(path)[1:]]
        assert times == [
            "2024-03-01 12:00:05",
            "2024-03-01 12:00:10",
            "2024-03-01 12:00:15",
        ]

    def test_empty_batch_is_noop(self, temp_dir):
        with CsvSampleSink(temp_dir, "log") as sink:
            assert sink.append_samples([]) == 0
            path = sink.path
        assert len(read_lines(path)) == 1

    def test_read_back_maps_missing_to_null(self, temp_dir):
        sink = CsvSampleSink(temp_dir, "log")
        with sink:
            sink.append_samples([make_sample(1), make_sample(2, cpu=None)])

        frame = sink.read_back()
        assert frame.columns == CSV_HEADER
        assert frame.height == 2
        assert frame["CPUUsage(%)"].to_list() == [12.5, None]
        assert frame["CPUSpeed(MHz)"].to_list() == [2400.0, 2400.0]
        assert frame["Time"].to_list()[0] == "2024-03-01 12:00:05"

    def test_read_back_header_only(self, temp_dir):
        sink = CsvSampleSink(temp_dir, "log")
        with sink:
            pass
        assert sink.read_back().height == 0

    def test_append_when_not_open(self, temp_dir):
        sink = CsvSampleSink(temp_dir, "log")
        with pytest.raises(SinkUnavailableError):
            sink.append_samples([make_sample(1)])

    def test_read_back_never_opened(self, temp_dir):
        with pytest.raises(SinkUnavailableError):
            CsvSampleSink(temp_dir, "log").read_back()

    def test_unusable_directory(self, temp_dir):
        blocker = temp_dir / "not_a_dir"
        blocker.write_text("")

        sink = CsvSampleSink(blocker, "log")
        with pytest.raises(SinkUnavailableError):
            sink.open()
        assert sink.path is None

    def test_close_is_idempotent(self, temp_dir):
        sink = CsvSampleSink(temp_dir, "log")
        sink.open()
        sink.close()
        sink.close()
        with pytest.raises(SinkUnavailableError):
            sink.append_samples([make_sample(1)])


class CloseFailingSink(CsvSampleSink):
    """CSV sink whose close always fails after releasing the file."""

    def close(self):
        super().close()
        raise SinkUnavailableError("close failed", path=str(self.path))


@pytest.mark.unit
class TestSinkContextManager:
    """Test cases for the context manager protocol of sinks."""

    def test_close_failure_does_not_mask_active_exception(self, temp_dir, caplog):
        with pytest.raises(RuntimeError, match="collection fault"):
            with CloseFailingSink(temp_dir, "log"):
                raise RuntimeError("collection fault")
        assert "Failed to close sink while handling RuntimeError" in caplog.text

    def test_close_failure_raised_on_clean_exit(self, temp_dir):
        with pytest.raises(SinkUnavailableError, match="close failed"):
            with CloseFailingSink(temp_dir, "log"):
                pass
