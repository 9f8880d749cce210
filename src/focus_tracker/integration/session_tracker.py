"""
Session context: owns the tracking settings, the bounded sample history and
the current session, and finalizes the session exactly once.
"""

import logging
import time
from collections import deque
from dataclasses import replace
from typing import Callable, Iterator, Optional, Tuple

from ..config import DEFAULT_SETTINGS, TrackingSettings
from ..types import CameraStatus, TrackingSample, TrackingSession
from .session_metrics import reduce_session_metrics

logger = logging.getLogger(__name__)


DEFAULT_HISTORY_CAPACITY = 1000


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class BoundedHistory:
    """Fixed-capacity ring buffer of tracking samples; the oldest are dropped."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._samples = deque(maxlen=capacity)

    def append(self, sample: TrackingSample) -> None:
        self._samples.append(sample)

    def snapshot(self) -> Tuple[TrackingSample, ...]:
        return tuple(self._samples)

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[TrackingSample]:
        return iter(self._samples)


class SessionTracker:
    """
    Explicit session context shared by the control surface.

    Samples are appended only while a session is active. Stopping computes
    the metrics from the full history and hands the finished session to
    ``on_session_finished``.
    """

    def __init__(
        self,
        settings: TrackingSettings = DEFAULT_SETTINGS,
        history_capacity: int = DEFAULT_HISTORY_CAPACITY,
        clock: Callable[[], int] = wall_clock_ms,
        on_session_finished: Optional[Callable[[TrackingSession], None]] = None
    ):
        self.settings = settings.validate()
        self.history = BoundedHistory(history_capacity)
        self.clock = clock
        self.on_session_finished = on_session_finished

        self.current_session: Optional[TrackingSession] = None
        self.is_tracking = False
        self.latest_sample: Optional[TrackingSample] = None
        self.camera_status = CameraStatus()
        self.last_error: Optional[str] = None

    def start_session(self) -> TrackingSession:
        if self.is_tracking:
            raise RuntimeError(f"Session {self.current_session.id} is already running")

        now = self.clock()
        self.current_session = TrackingSession(id=f"session_{now}", start_time=now)
        self.history.clear()
        self.latest_sample = None
        self.last_error = None
        self.is_tracking = True

        logger.info(f"Session {self.current_session.id} started")
        return self.current_session

    def record(self, sample: TrackingSample) -> bool:
        """Append a sample to the active session; samples outside a session are discarded."""
        if not self.is_tracking:
            logger.debug(f"Discarding sample {sample.timestamp}: no active session")
            return False

        self.history.append(sample)
        self.latest_sample = sample
        return True

    def stop_session(self) -> Optional[TrackingSession]:
        """Finalize the active session. Returns None when nothing is running."""
        if not self.is_tracking:
            return None

        self.is_tracking = False
        end_time = self.clock()
        duration = (end_time - self.current_session.start_time) / 1000.0
        metrics = reduce_session_metrics(self.history.snapshot(), duration)

        finished = replace(
            self.current_session,
            end_time=end_time,
            total_duration=duration,
            metrics=metrics,
        )
        self.current_session = finished

        logger.info(
            f"Session {finished.id} finished: {duration:.1f}s, "
            f"efficiency {metrics.efficiency:.1f}%, {len(self.history)} samples"
        )

        if self.on_session_finished is not None:
            self.on_session_finished(finished)
        return finished

    def mark_as_pomodoro(self, pomodoro_count: Optional[int] = None) -> None:
        """Tag the running session as a Pomodoro work session."""
        if self.current_session is None or self.current_session.is_finished:
            return
        tags = dict(self.current_session.tags)
        tags['pomodoro'] = True
        if pomodoro_count is not None:
            tags['pomodoroCount'] = pomodoro_count
        self.current_session = replace(self.current_session, tags=tags)

    def update_settings(self, **changes) -> TrackingSettings:
        self.settings = self.settings.merged(**changes)
        return self.settings

    def update_camera_status(self, status: CameraStatus) -> None:
        self.camera_status = status

    def set_error(self, message: str) -> None:
        self.last_error = message

    def clear_error(self) -> None:
        self.last_error = None
