"""
Rule-based engagement classification.
"""

import logging

from ...config import TrackingSettings
from ...types import BlinkSample, DistractionReason, EngagementSample, HeadPoseSample

logger = logging.getLogger(__name__)


CENTERED_POINTS = 40
LOOKING_AT_SCREEN_POINTS = 40
NORMAL_BLINK_RATE_POINTS = 20
# Exclusive bounds, blinks per minute
NORMAL_BLINK_RATE = (10, 30)


class EngagementClassifier:
    """
    Combines head pose, face centering and blink cadence into a distraction
    verdict and a 0-100 engagement score.

    Holds no per-frame state; only the current thresholds.
    """

    def __init__(self, settings: TrackingSettings):
        self.settings = settings

    def update_settings(self, settings: TrackingSettings) -> None:
        self.settings = settings

    def classify(self, head_pose: HeadPoseSample, blink: BlinkSample,
                 face_centered: bool, timestamp: int) -> EngagementSample:
        head_turned_away = abs(head_pose.yaw) > self.settings.yaw_threshold
        looking_up = head_pose.pitch < -self.settings.pitch_up_threshold
        looking_down = head_pose.pitch > self.settings.pitch_down_threshold

        looking_at_screen = not (head_turned_away or looking_up or looking_down)

        reason = None
        if head_turned_away:
            reason = DistractionReason.HEAD_TURNED
        elif looking_up or looking_down:
            reason = DistractionReason.LOOKING_AWAY
        distracted = reason is not None

        level = 0
        if not distracted:
            if face_centered:
                level += CENTERED_POINTS
            if looking_at_screen:
                level += LOOKING_AT_SCREEN_POINTS
            low, high = NORMAL_BLINK_RATE
            if low < blink.average_blink_rate < high:
                level += NORMAL_BLINK_RATE_POINTS

        return EngagementSample(
            timestamp=timestamp,
            level=level,
            face_centered=face_centered,
            looking_at_screen=looking_at_screen,
            distracted=distracted,
            distraction_reason=reason,
        )


def face_not_detected_sample(timestamp: int) -> EngagementSample:
    """Engagement sample used when the detector found no face."""
    return EngagementSample(
        timestamp=timestamp,
        level=0,
        face_centered=False,
        looking_at_screen=False,
        distracted=True,
        distraction_reason=DistractionReason.FACE_NOT_DETECTED,
    )
