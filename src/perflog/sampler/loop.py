"""
The fixed-cadence sampling loop.

One logical thread drives the ticks. Each tick queries the metrics source for
three independent readings, buffers the resulting sample, prints a progress
line and flushes the buffer to the sink in batches. Ticks are scheduled
against the run start (tick ``i`` ends at ``start + i * interval``), so
collection latency does not accumulate into the total run time.
"""

import logging
import threading
import time
from datetime import datetime
from typing import Callable, Optional

from ..collectors.base import FIELD_LABELS, AbstractMetricsSource
from ..models.config import DEFAULT_FLUSH_BATCH_SIZE, compute_total_ticks
from ..models.results import SummaryStats
from ..models.runtime import RunContext
from ..models.sample import Sample
from ..storage.base import SampleSink
from ..validation import SinkUnavailableError
from .report import format_progress_line, log_summary
from .stats import compute_summary_stats

logger = logging.getLogger(__name__)


class SamplerLoop:
    """
    Runs a fixed number of ticks against a metrics source and a sink.

    The clock, wall clock and sleeper are injectable so the cadence can be
    driven deterministically. The default sleeper waits on the stop event, so
    a stop request cuts the current sleep short.

    With ``flush_on_exit`` disabled, samples still buffered when the loop
    ends early are dropped instead of written.
    """

    def __init__(
        self,
        metrics_source: AbstractMetricsSource,
        sink: SampleSink,
        interval_seconds: float,
        total_ticks: int,
        flush_batch_size: int = DEFAULT_FLUSH_BATCH_SIZE,
        stop_event: Optional[threading.Event] = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = datetime.now,
        sleeper: Optional[Callable[[float], object]] = None,
        flush_on_exit: bool = True,
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")
        if total_ticks < 0:
            raise ValueError(f"total_ticks must be >= 0, got {total_ticks}")
        if flush_batch_size < 1:
            raise ValueError(f"flush_batch_size must be >= 1, got {flush_batch_size}")

        self.metrics_source = metrics_source
        self.sink = sink
        self.interval_seconds = interval_seconds
        self.total_ticks = total_ticks
        self.flush_batch_size = flush_batch_size
        self.stop_event = stop_event or threading.Event()
        self.clock = clock
        self.wall_clock = wall_clock
        self.sleeper = sleeper or self.stop_event.wait
        self.flush_on_exit = flush_on_exit
        self.context: Optional[RunContext] = None

    def request_stop(self) -> None:
        """Ask the loop to stop before the next tick begins."""
        self.stop_event.set()

    def run(self) -> SummaryStats:
        """
        Execute the run and return its statistics.

        Buffered samples are flushed and the sink is closed on every exit
        path. An operator interrupt (stop event or KeyboardInterrupt) ends
        the loop and still produces statistics: the tick count covers every
        tick that ran, the per-field figures cover the persisted rows.

        Raises:
            SinkUnavailableError: If the sink cannot be opened, written or
                read back.
        """
        logger.info(
            f"Sampling with {self.metrics_source.describe()}: {self.total_ticks} ticks "
            f"every {self.interval_seconds}s, flushing every {self.flush_batch_size} samples"
        )

        fault: Optional[BaseException] = None
        sink_failed = False
        with self.sink:
            context = RunContext(
                total_ticks=self.total_ticks,
                interval_seconds=self.interval_seconds,
                flush_batch_size=self.flush_batch_size,
                start_monotonic=self.clock(),
                start_wall=self.wall_clock(),
                sink=self.sink,
                stop_event=self.stop_event,
            )
            self.context = context
            context.nominal_frequency_mhz = self._read_nominal_frequency()

            try:
                self._run_ticks(context)
            except KeyboardInterrupt:
                context.interrupted = True
                logger.warning(f"Interrupted by operator after {context.ticks_completed} ticks")
            except SinkUnavailableError:
                sink_failed = True
                raise
            except Exception as e:
                # Fatal fault: keep what was collected, finalize, then re-raise.
                context.interrupted = True
                fault = e
                logger.error(
                    f"Sampling aborted after {context.ticks_completed} ticks: "
                    f"{type(e).__name__}: {e}",
                    exc_info=True,
                )
            finally:
                if context.buffer and not sink_failed:
                    if self.flush_on_exit:
                        self._flush(context)
                    else:
                        logger.warning(f"Discarding {len(context.buffer)} unflushed samples")
                        context.buffer.clear()

            stats = self._finalize(context)

            # Raised inside the sink block so a failing close cannot mask it.
            if fault is not None:
                raise fault
        return stats

    def _finalize(self, context: RunContext) -> SummaryStats:
        frame = self.sink.read_back()
        stats = compute_summary_stats(
            frame,
            total_ticks=self.total_ticks,
            interrupted=context.interrupted,
            output_file=self.sink.path,
            ticks_completed=context.ticks_completed,
        )
        stats.metadata.update(
            {
                "rows_persisted": context.rows_flushed,
                "metrics_source": self.metrics_source.describe(),
                "interval_seconds": self.interval_seconds,
                "flush_batch_size": self.flush_batch_size,
                "nominal_frequency_mhz": context.nominal_frequency_mhz,
                "started_at": context.start_wall.replace(microsecond=0).isoformat(sep=" "),
            }
        )
        log_summary(stats)
        return stats

    def _read_nominal_frequency(self) -> Optional[float]:
        reading = self.metrics_source.sample_nominal_frequency()
        if not reading.is_present:
            logger.warning(
                f"Failed to read nominal CPU frequency ({reading.reason}); "
                f"CPU frequency will be recorded as N/A"
            )
            return None
        logger.info(f"Nominal CPU frequency: {reading.value} MHz")
        return reading.value

    def _run_ticks(self, context: RunContext) -> None:
        for tick in range(1, context.total_ticks + 1):
            if context.stop_requested:
                context.interrupted = True
                logger.warning(f"Stop requested, ending run before tick {tick}")
                break

            self._run_tick(context, tick)

            if tick < context.total_ticks:
                self._sleep_until(context.target_time(tick))

    def _run_tick(self, context: RunContext, tick: int) -> Sample:
        timestamp = self.wall_clock()
        readings = self.metrics_source.sample_all(context.nominal_frequency_mhz)
        for reading in readings:
            if not reading.is_present:
                logger.warning(
                    f"Failed to read {FIELD_LABELS[reading.field]} on tick {tick}: {reading.reason}"
                )

        sample = Sample.from_readings(tick, timestamp, readings)
        context.buffer.append(sample)
        context.ticks_completed = tick
        logger.info(format_progress_line(sample, context.total_ticks))

        if len(context.buffer) >= context.flush_batch_size or tick == context.total_ticks:
            self._flush(context)
        return sample

    def _flush(self, context: RunContext) -> None:
        written = self.sink.append_samples(context.buffer)
        context.rows_flushed += written
        context.buffer.clear()

    def _sleep_until(self, target: float) -> None:
        remaining = target - self.clock()
        if remaining > 0:
            self.sleeper(remaining)


def run(
    duration: float,
    interval: float,
    metrics_source: AbstractMetricsSource,
    sink: SampleSink,
    flush_batch_size: int = DEFAULT_FLUSH_BATCH_SIZE,
    stop_event: Optional[threading.Event] = None,
    **loop_kwargs,
) -> SummaryStats:
    """
    Sample ``floor(duration / interval)`` ticks and return the run statistics.

    Args:
        duration: Total wall-clock seconds to run
        interval: Seconds between ticks
        metrics_source: Source of the per-tick readings
        sink: Append-only destination of the rows
        flush_batch_size: Samples buffered between writes
        stop_event: Event that ends the run early when set
        **loop_kwargs: clock/wall_clock/sleeper overrides for SamplerLoop
    """
    if duration <= 0:
        raise ValueError(f"duration must be > 0, got {duration}")
    if interval <= 0:
        raise ValueError(f"interval must be > 0, got {interval}")

    loop = SamplerLoop(
        metrics_source=metrics_source,
        sink=sink,
        interval_seconds=interval,
        total_ticks=compute_total_ticks(duration, interval),
        flush_batch_size=flush_batch_size,
        stop_event=stop_event,
        **loop_kwargs,
    )
    return loop.run()
