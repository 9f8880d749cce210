"""
Cancellable periodic task used for the capture watchdog.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Calls ``callback`` every ``interval`` seconds on a daemon thread until
    cancelled. The ``threading.Event`` is the cancellation token: once set,
    no further call starts.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = 'periodic-task'):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._cancelled.is_set()

    def start(self) -> 'PeriodicTask':
        if self._thread is not None:
            raise RuntimeError(f"{self.name} already started")
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        return self

    def cancel(self, timeout: float = 1.0) -> None:
        """Set the token and wait for an in-flight call to finish."""
        self._cancelled.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        while not self._cancelled.wait(self.interval):
            try:
                self.callback()
            except Exception as e:
                logger.error(f"Error in {self.name}: {e}")
