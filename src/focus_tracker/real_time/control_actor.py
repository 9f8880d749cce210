"""
Control actor: consumes capture events on the foreground thread and drives
the session tracker.
"""

import logging
from typing import Callable, List, Optional

from ..integration.session_tracker import SessionTracker
from ..types import CameraStatus, TrackingSample, TrackingSession
from .channels import Channel, Message, MessageKind
from .command_relay import CommandRelay

SampleListener = Callable[[TrackingSample], None]


class ControlActor:
    """
    Control side of the tracker.

    Commands go downstream through a ``CommandRelay`` that holds them until
    the capture actor reports ready. Upstream events are handled one at a
    time from ``poll()``, so the tracker is only touched from the polling
    thread.
    """

    def __init__(self, inbox: Channel, outbox: Channel, tracker: SessionTracker):
        """
        Args:
            inbox: Upstream channel of capture events
            outbox: Downstream channel to the capture actor
            tracker: Session context receiving samples and status
        """
        self.inbox = inbox
        self.outbox = outbox
        self.tracker = tracker
        self.relay = CommandRelay(outbox.send)

        self._listeners: List[SampleListener] = []
        self._session_unsubscribe: Optional[Callable[[], None]] = None

        self.logger = logging.getLogger(__name__)

    def subscribe(self, listener: SampleListener) -> Callable[[], None]:
        """Register a sample listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def poll(self, timeout: Optional[float] = 0) -> int:
        """
        Handle every upstream event currently available.

        Args:
            timeout: Seconds to wait for the first event

        Returns:
            Number of events handled
        """
        handled = 0
        message = self.inbox.receive(timeout=timeout)
        while message is not None:
            self.handle(message)
            handled += 1
            message = self.inbox.receive(timeout=0)
        return handled

    def handle(self, message: Message) -> None:
        if message.kind == MessageKind.READY:
            self.relay.mark_ready()
        elif message.kind == MessageKind.DATA:
            self._dispatch_sample(message.payload)
        elif message.kind == MessageKind.STATUS:
            status: CameraStatus = message.payload
            self.tracker.update_camera_status(status)
            if status.error:
                self.tracker.set_error(status.error)
        elif message.kind == MessageKind.ERROR:
            error_message = message.payload['message']
            self.logger.error(f"Capture error: {error_message}")
            self.tracker.set_error(error_message)
        else:
            self.logger.warning(f"Unexpected message on control inbox: {message.kind.value}")

    def _dispatch_sample(self, payload) -> None:
        sample = payload['sample']
        session = self.tracker.current_session
        if not self.tracker.is_tracking or payload.get('session_id') != session.id:
            self.logger.debug(f"Discarding sample {sample.timestamp} from session {payload.get('session_id')}")
            return
        for listener in list(self._listeners):
            listener(sample)

    # Commands

    def start_tracking(self) -> TrackingSession:
        session = self.tracker.start_session()
        self._session_unsubscribe = self.subscribe(self.tracker.record)
        self.relay.send(MessageKind.START, {'settings': self.tracker.settings, 'session_id': session.id})
        return session

    def stop_tracking(self) -> Optional[TrackingSession]:
        """Stop capture and finalize the session; None if nothing was running."""
        if not self.tracker.is_tracking:
            return None

        self.relay.send(MessageKind.STOP)
        if self._session_unsubscribe is not None:
            self._session_unsubscribe()
            self._session_unsubscribe = None
        return self.tracker.stop_session()

    def update_settings(self, **changes) -> None:
        settings = self.tracker.update_settings(**changes)
        self.relay.send(MessageKind.SETTINGS_UPDATE, {'settings': settings})
