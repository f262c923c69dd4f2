"""
Signal handling for sampler runs.

SIGINT and SIGTERM are turned into a stop request on the run's stop event, so
the loop finishes the current tick, flushes its buffer and finalizes instead
of dying mid-write.
"""

import logging
import signal
import threading
from typing import Any

logger = logging.getLogger(__name__)


class SignalHandler:
    """
    Installs SIGINT/SIGTERM handlers that set a stop event.

    The original handlers are restored by cleanup_signal_handlers() or when
    used as a context manager.
    """

    def __init__(self, stop_event: threading.Event):
        self.stop_event = stop_event
        self.signals_received = 0
        self._original_sigint_handler = None
        self._original_sigterm_handler = None
        self._signal_handlers_set = False

    def setup_signal_handlers(self) -> None:
        """Install the handlers. Only possible from the main thread."""
        try:
            self._original_sigint_handler = signal.signal(signal.SIGINT, self._handle_signal)
            self._original_sigterm_handler = signal.signal(signal.SIGTERM, self._handle_signal)
            self._signal_handlers_set = True
            logger.debug("Signal handlers set up for sampler run")
        except ValueError as e:
            logger.warning(f"Failed to set up signal handlers: {e}")

    def cleanup_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        if not self._signal_handlers_set:
            return

        try:
            if self._original_sigint_handler is not None:
                signal.signal(signal.SIGINT, self._original_sigint_handler)
            if self._original_sigterm_handler is not None:
                signal.signal(signal.SIGTERM, self._original_sigterm_handler)
            logger.debug("Signal handlers restored")
        except ValueError as e:
            logger.warning(f"Failed to restore signal handlers: {e}")
        finally:
            self._signal_handlers_set = False

    def _handle_signal(self, signum: int, frame: Any) -> None:
        self.signals_received += 1
        if self.stop_event.is_set():
            logger.warning("Shutdown already in progress. Please be patient.")
            return
        logger.warning(
            f"Signal {signal.strsignal(signum)} received. Stopping after the current tick..."
        )
        self.stop_event.set()

    def __enter__(self) -> "SignalHandler":
        self.setup_signal_handlers()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup_signal_handlers()
