"""
Typed, ordered message channels between the control and capture surfaces.
"""

from dataclasses import dataclass
from enum import Enum
from queue import Empty, Queue
from typing import Any, Optional


class MessageKind(str, Enum):
    # capture -> control
    READY = 'ready'
    DATA = 'data'
    STATUS = 'status'
    ERROR = 'error'
    # control -> capture
    START = 'start'
    STOP = 'stop'
    SETTINGS_UPDATE = 'settings-update'
    # internal to the capture actor
    FRAME = 'frame'
    WATCHDOG_TICK = 'watchdog-tick'
    SOURCE_ERROR = 'source-error'


@dataclass(frozen=True)
class Message:
    kind: MessageKind
    payload: Any = None


class Channel:
    """Unidirectional FIFO channel; unbounded, safe to use across threads."""

    def __init__(self, name: str):
        self.name = name
        self._queue = Queue()

    def send(self, message: Message) -> None:
        self._queue.put(message)

    def receive(self, timeout: Optional[float] = None) -> Optional[Message]:
        """Next message, or None if nothing arrived within ``timeout`` seconds."""
        try:
            if timeout == 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def __len__(self) -> int:
        return self._queue.qsize()
