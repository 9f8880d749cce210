"""
Blink Detection System

Edge-triggered blink counting on the averaged Eye Aspect Ratio (EAR) and a
trailing one-minute blink rate estimate.
"""

import logging
import math
from collections import deque
from typing import Any, Dict

from ...types import BlinkSample


RATE_WINDOW_MS = 60000
# Open-eye EAR assumed before the first frame of a session
INITIAL_EAR = 0.3


class BlinkDetector:
    """
    Per-session blink detector.

    A blink is counted once, on the frame where EAR drops below the
    threshold after a frame at or above it. Frames that stay below the
    threshold report ``blink_detected`` but do not add to the count.
    """

    def __init__(self, ear_threshold: float = 0.2):
        """
        Initialize blink detector.

        Args:
            ear_threshold: EAR threshold for blink detection
        """
        self.ear_threshold = ear_threshold

        self.previous_ear = INITIAL_EAR
        self.blink_count = 0
        self.blink_history = deque()  # blink timestamps, ms

        self.logger = logging.getLogger(__name__)

    def update(self, ear_value: float, timestamp: int) -> BlinkSample:
        """
        Feed one EAR measurement.

        Args:
            ear_value: Averaged eye aspect ratio of the frame
            timestamp: Frame time in wall-clock milliseconds

        Returns:
            Blink sample for the frame
        """
        blink_detected = ear_value < self.ear_threshold

        if blink_detected and self.previous_ear >= self.ear_threshold:
            self.blink_count += 1
            self.blink_history.append(timestamp)
            self._evict_old_blinks(timestamp)
            self.logger.debug(f"Blink detected! Total blinks: {self.blink_count}")

        self.previous_ear = ear_value

        return BlinkSample(
            timestamp=timestamp,
            eye_aspect_ratio=ear_value,
            blink_detected=blink_detected,
            blink_count=self.blink_count,
            average_blink_rate=self.get_blink_rate(timestamp),
        )

    def idle_sample(self, timestamp: int) -> BlinkSample:
        """Blink sample for a frame without a face; detector state is untouched."""
        return BlinkSample(
            timestamp=timestamp,
            eye_aspect_ratio=0.0,
            blink_detected=False,
            blink_count=self.blink_count,
            average_blink_rate=0,
        )

    def _evict_old_blinks(self, timestamp: int) -> None:
        while self.blink_history and timestamp - self.blink_history[0] >= RATE_WINDOW_MS:
            self.blink_history.popleft()

    def get_blink_rate(self, timestamp: int) -> int:
        """
        Calculate blink rate (blinks per minute) from the kept blinks.

        Once the kept blinks span a full minute their count is the rate.
        During warm-up the count is extrapolated to 60 seconds.
        """
        if not self.blink_history:
            return 0

        span_seconds = (timestamp - self.blink_history[0]) / 1000.0

        if span_seconds >= 60:
            return len(self.blink_history)
        if span_seconds > 0:
            return _round_half_up(len(self.blink_history) / span_seconds * 60)
        return 0

    def reset_statistics(self) -> None:
        """Reset blink detection statistics."""
        self.previous_ear = INITIAL_EAR
        self.blink_count = 0
        self.blink_history.clear()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def create_blink_detector(config: Dict[str, Any]) -> BlinkDetector:
    """
    Factory function to create blink detector with configuration.

    Args:
        config: Tracking configuration dictionary

    Returns:
        Configured BlinkDetector instance
    """
    return BlinkDetector(ear_threshold=config.get('blink_threshold', 0.2))
