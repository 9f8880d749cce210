"""
Frame analyzer that integrates the geometry, blink and engagement modules
into one tracking sample per landmark frame.
"""

import logging
from typing import Optional

import numpy as np

from ..config import TrackingSettings
from ..modules.blink_detection import BlinkDetector
from ..modules.engagement import EngagementClassifier, face_not_detected_sample
from ..modules.geometry import (
    average_eye_aspect_ratio,
    estimate_pose_from_landmarks,
    extract_display_landmarks,
    is_face_centered,
)
from ..types import HeadPoseSample, TrackingSample

logger = logging.getLogger(__name__)


class FrameAnalyzer:
    """
    Turns landmark frames into ``TrackingSample`` records.

    Owns the session's blink detector, so one analyzer serves one session
    at a time; call ``reset()`` between sessions.
    """

    def __init__(self, settings: TrackingSettings):
        self.settings = settings
        self.blink_detector = BlinkDetector(ear_threshold=settings.blink_threshold)
        self.engagement_classifier = EngagementClassifier(settings)

    def update_settings(self, settings: TrackingSettings) -> None:
        self.settings = settings
        self.blink_detector.ear_threshold = settings.blink_threshold
        self.engagement_classifier.update_settings(settings)
        logger.info(f"Tracking settings updated: {settings.to_dict()}")

    def reset(self) -> None:
        self.blink_detector.reset_statistics()

    def analyze(self, landmarks: Optional[np.ndarray], timestamp: int) -> TrackingSample:
        """
        Analyze a single landmark frame.

        Args:
            landmarks: ``(N, 3)`` landmark array, or None when no face was found
            timestamp: Frame time in wall-clock milliseconds

        Returns:
            Tracking sample for the frame

        Raises:
            LandmarkIntegrityError: the frame lacks an expected landmark
        """
        if landmarks is None or len(landmarks) == 0:
            return self.no_face_sample(timestamp)

        # Geometry first so an incomplete frame never advances blink state
        ear = average_eye_aspect_ratio(landmarks)
        yaw, pitch, roll = estimate_pose_from_landmarks(landmarks)
        face_centered = is_face_centered(landmarks)
        face_landmarks = extract_display_landmarks(landmarks)

        blink = self.blink_detector.update(ear, timestamp)
        head_pose = HeadPoseSample(timestamp=timestamp, yaw=yaw, pitch=pitch, roll=roll)
        engagement = self.engagement_classifier.classify(head_pose, blink, face_centered, timestamp)

        return TrackingSample(
            timestamp=timestamp,
            face_detected=True,
            blink=blink,
            head_pose=head_pose,
            engagement=engagement,
            face_landmarks=face_landmarks,
        )

    def no_face_sample(self, timestamp: int) -> TrackingSample:
        """Sample for a frame without a face, also used by the watchdog."""
        return TrackingSample(
            timestamp=timestamp,
            face_detected=False,
            blink=self.blink_detector.idle_sample(timestamp),
            head_pose=HeadPoseSample(timestamp=timestamp, yaw=0.0, pitch=0.0, roll=0.0),
            engagement=face_not_detected_sample(timestamp),
        )
