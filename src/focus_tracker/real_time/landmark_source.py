"""
Capability interface for the face landmark collaborator.

The capture actor only depends on ``LandmarkSource``; concrete detection and
camera libraries live behind adapters such as ``MediaPipeLandmarkSource``.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import numpy as np


# (landmarks or None when no face, frame timestamp in ms)
ResultCallback = Callable[[Optional[np.ndarray], int], None]
ErrorCallback = Callable[[str], None]


class CapabilityUnavailableError(RuntimeError):
    """The detector model or camera cannot be used right now."""


class LandmarkSource(ABC):
    """
    Delivers one landmark result per captured frame once started.

    A failure after ``start()`` returned is reported once through the error
    callback; the source then delivers nothing until started again.
    """

    def __init__(self):
        self._callback: Optional[ResultCallback] = None
        self._error_callback: Optional[ErrorCallback] = None

    def on_result(self, callback: ResultCallback) -> None:
        self._callback = callback

    def on_error(self, callback: ErrorCallback) -> None:
        self._error_callback = callback

    def emit(self, landmarks: Optional[np.ndarray], timestamp: int) -> None:
        if self._callback is not None:
            self._callback(landmarks, timestamp)

    def report_error(self, message: str) -> None:
        if self._error_callback is not None:
            self._error_callback(message)

    @abstractmethod
    def configure(self, options: Dict[str, Any]) -> None:
        """Apply capture options; raises CapabilityUnavailableError if setup fails."""

    @abstractmethod
    def start(self) -> None:
        """Begin delivering results; raises CapabilityUnavailableError on failure."""

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering results. Safe to call when not started."""
