"""
Readiness-gated command relay between the control and capture surfaces.
"""

import logging
from collections import deque
from typing import Any, Callable, Tuple

from .channels import Message, MessageKind


class CommandRelay:
    """
    Holds commands until the capture surface signals it is ready.

    The gate opens once and never closes. Queued commands are delivered in
    enqueue order with no de-duplication, coalescing or cancellation.
    """

    def __init__(self, deliver: Callable[[Message], None]):
        """
        Args:
            deliver: Sends one message to the capture surface
        """
        self.deliver = deliver
        self.is_ready = False
        self._pending = deque()

        self.logger = logging.getLogger(__name__)

    @property
    def pending(self) -> Tuple[Message, ...]:
        return tuple(self._pending)

    def send(self, kind: MessageKind, payload: Any = None) -> None:
        message = Message(kind, payload)
        if self.is_ready:
            self.deliver(message)
        else:
            self._pending.append(message)
            self.logger.info(f"Capture surface not ready, queued '{kind.value}' ({len(self._pending)} pending)")

    def mark_ready(self) -> None:
        if self.is_ready:
            return

        self.is_ready = True
        self.logger.info(f"Capture surface ready, delivering {len(self._pending)} queued commands")
        while self._pending:
            self.deliver(self._pending.popleft())
