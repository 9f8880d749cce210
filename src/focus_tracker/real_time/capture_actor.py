"""
Capture actor: owns the landmark source and the frame analyzer, turns source
results into tracking samples and reports them upstream.

All state changes happen on the actor's own thread while it handles inbox
messages. The source callback and the watchdog only post messages.
"""

import logging
import threading
from typing import Callable, Optional

import numpy as np

from ..config import DEFAULT_SETTINGS, TrackingSettings
from ..integration.frame_analyzer import FrameAnalyzer
from ..integration.session_tracker import wall_clock_ms
from ..modules.geometry import LandmarkIntegrityError
from ..types import CameraStatus, TrackingSample
from .channels import Channel, Message, MessageKind
from .landmark_source import CapabilityUnavailableError, LandmarkSource
from .watchdog import PeriodicTask


class CaptureActor:
    """
    Capture side of the tracker.

    Args:
        source: Landmark source delivering per-frame results
        inbox: Downstream channel (commands plus internal frame/tick messages)
        outbox: Upstream channel (ready, data, status and error events)
        settings: Initial tracking settings
        watchdog_interval: Seconds between watchdog ticks
        watchdog_timeout: Seconds without a sample before a no-face sample is emitted
        clock: Wall-clock source in milliseconds
    """

    def __init__(
        self,
        source: LandmarkSource,
        inbox: Channel,
        outbox: Channel,
        settings: TrackingSettings = DEFAULT_SETTINGS,
        watchdog_interval: float = 1.0,
        watchdog_timeout: float = 2.0,
        clock: Callable[[], int] = wall_clock_ms
    ):
        self.source = source
        self.inbox = inbox
        self.outbox = outbox
        self.settings = settings
        self.watchdog_interval = watchdog_interval
        self.watchdog_timeout_ms = int(watchdog_timeout * 1000)
        self.clock = clock

        self.analyzer = FrameAnalyzer(settings)
        self.is_initialized = False
        self.is_active = False
        self.last_sample_time = 0
        self.session_id: Optional[str] = None
        self.watchdog: Optional[PeriodicTask] = None

        # At most one frame message waits in the inbox at any time
        self._frame_lock = threading.Lock()
        self._frame_pending = False

        self._shutdown = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.source.on_result(self._on_source_result)
        self.source.on_error(self._on_source_error)
        self.logger = logging.getLogger(__name__)

    # Lifecycle

    def initialize(self) -> bool:
        """
        Configure the source and announce readiness.

        Returns:
            True if the source is usable; otherwise status{error} and error
            events are emitted and ready is withheld
        """
        try:
            self.source.configure({'fps': self.settings.fps_background})
        except CapabilityUnavailableError as e:
            self.logger.error(f"Landmark source unavailable: {e}")
            self._emit_status(error=str(e))
            self._emit_error(f"Initialization failed: {e}")
            return False

        self.is_initialized = True
        self.outbox.send(Message(MessageKind.READY))
        self._emit_status()
        self.logger.info("Capture actor initialized")
        return True

    def start(self) -> 'CaptureActor':
        """Run the actor loop on its own thread."""
        if self._thread is not None:
            raise RuntimeError("Capture actor already started")
        self._thread = threading.Thread(target=self.run, name='capture-actor', daemon=True)
        self._thread.start()
        return self

    def run(self) -> None:
        self.initialize()
        while not self._shutdown.is_set():
            self.run_once(timeout=0.1)

    def run_once(self, timeout: Optional[float] = 0) -> bool:
        """Handle the next inbox message. Returns False if none arrived."""
        message = self.inbox.receive(timeout=timeout)
        if message is None:
            return False
        self.handle(message)
        return True

    def shutdown(self) -> None:
        self._shutdown.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        self._stop_capture()

    # Message handling

    def handle(self, message: Message) -> None:
        try:
            if message.kind == MessageKind.START:
                self._handle_start(message.payload)
            elif message.kind == MessageKind.STOP:
                self._handle_stop()
            elif message.kind == MessageKind.SETTINGS_UPDATE:
                self._apply_settings(message.payload['settings'])
            elif message.kind == MessageKind.FRAME:
                self._handle_frame(*message.payload)
            elif message.kind == MessageKind.WATCHDOG_TICK:
                self._handle_watchdog_tick(message.payload)
            elif message.kind == MessageKind.SOURCE_ERROR:
                self._handle_source_error(message.payload['message'])
            else:
                self.logger.warning(f"Unexpected message on capture inbox: {message.kind.value}")
        except Exception as e:
            self.logger.error(f"Error handling '{message.kind.value}': {e}")
            self._emit_error(str(e))

    def _handle_start(self, payload) -> None:
        if payload and payload.get('settings') is not None:
            self._apply_settings(payload['settings'])
        # Tags every sample so the control side can drop late ones
        self.session_id = (payload or {}).get('session_id')

        if self.is_active:
            self.logger.warning("Start requested while capture is already active")
            return

        try:
            self.source.configure({'fps': self.settings.fps_active})
            self.is_initialized = True
            self.source.start()
        except CapabilityUnavailableError as e:
            self.logger.error(f"Camera start failed: {e}")
            self._emit_status(error=str(e))
            self._emit_error(f"Camera start failed: {e}")
            return

        self.analyzer.reset()
        self.last_sample_time = self.clock()
        self.is_active = True

        self.watchdog = PeriodicTask(self.watchdog_interval, self._post_watchdog_tick, name='capture-watchdog')
        self.watchdog.start()

        self._emit_status()
        self.logger.info(f"Capture started at {self.settings.fps_active} FPS")

    def _handle_stop(self) -> None:
        self._stop_capture()
        self._emit_status()
        self.logger.info("Capture stopped")

    def _stop_capture(self) -> None:
        self.is_active = False
        if self.watchdog is not None:
            self.watchdog.cancel()
            self.watchdog = None
        self.source.stop()

    def _handle_source_error(self, message: str) -> None:
        if not self.is_active:
            self.logger.debug(f"Ignoring source error while inactive: {message}")
            return

        self.logger.error(f"Landmark source failed: {message}")
        self._stop_capture()
        self._emit_status(error=message)
        self._emit_error(message)

    def _apply_settings(self, settings: TrackingSettings) -> None:
        self.settings = settings
        self.analyzer.update_settings(settings)

    def _handle_frame(self, landmarks: Optional[np.ndarray], timestamp: int) -> None:
        with self._frame_lock:
            self._frame_pending = False

        if not self.is_active:
            self.logger.debug(f"Discarding frame {timestamp}: capture inactive")
            return

        try:
            sample = self.analyzer.analyze(landmarks, timestamp)
        except LandmarkIntegrityError as e:
            self.logger.error(f"Frame {timestamp} aborted: {e}")
            self._emit_error(f"Landmark integrity error: {e}")
            return

        self._emit_sample(sample)

    def _handle_watchdog_tick(self, posted_at: Optional[int] = None) -> None:
        if not self.is_active:
            return

        # Stamped when posted, so it never postdates a frame queued behind it
        now = posted_at if posted_at is not None else self.clock()
        if now - self.last_sample_time > self.watchdog_timeout_ms:
            self.logger.debug(f"No sample for {now - self.last_sample_time} ms, emitting face-not-detected")
            self._send_sample(self.analyzer.no_face_sample(now))

    # Producers (called from the source and watchdog threads)

    def _on_source_result(self, landmarks: Optional[np.ndarray], timestamp: int) -> None:
        with self._frame_lock:
            if self._frame_pending:
                self.logger.debug(f"Dropping frame {timestamp}: analysis already pending")
                return
            self._frame_pending = True
        self.inbox.send(Message(MessageKind.FRAME, (landmarks, timestamp)))

    def _post_watchdog_tick(self) -> None:
        self.inbox.send(Message(MessageKind.WATCHDOG_TICK, self.clock()))

    def _on_source_error(self, message: str) -> None:
        self.inbox.send(Message(MessageKind.SOURCE_ERROR, {'message': message}))

    # Events

    def _emit_sample(self, sample: TrackingSample) -> None:
        self.last_sample_time = self.clock()
        self._send_sample(sample)

    def _send_sample(self, sample: TrackingSample) -> None:
        self.outbox.send(Message(MessageKind.DATA, {'sample': sample, 'session_id': self.session_id}))

    def _emit_status(self, error: Optional[str] = None) -> None:
        status = CameraStatus(initialized=self.is_initialized, active=self.is_active, error=error)
        self.outbox.send(Message(MessageKind.STATUS, status))

    def _emit_error(self, message: str) -> None:
        self.outbox.send(Message(MessageKind.ERROR, {'message': message}))
