"""
Data records shared by the tracking pipeline.

Per-frame samples are immutable once produced. Every record that crosses the
capture/control boundary can be rendered to its camelCase wire shape with
``to_dict()``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class DistractionReason(str, Enum):
    """Why an engagement sample was classified as distracted."""
    HEAD_TURNED = 'head_turned'
    LOOKING_AWAY = 'looking_away'
    FACE_NOT_DETECTED = 'face_not_detected'


@dataclass(frozen=True)
class BlinkSample:
    timestamp: int
    eye_aspect_ratio: float
    blink_detected: bool
    blink_count: int
    average_blink_rate: float  # blinks per minute, windowed estimate

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'blinkDetected': self.blink_detected,
            'eyeAspectRatio': self.eye_aspect_ratio,
            'blinkCount': self.blink_count,
            'averageBlinkRate': self.average_blink_rate,
        }


@dataclass(frozen=True)
class HeadPoseSample:
    timestamp: int
    yaw: float
    pitch: float
    roll: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'yaw': self.yaw,
            'pitch': self.pitch,
            'roll': self.roll,
        }


@dataclass(frozen=True)
class EngagementSample:
    timestamp: int
    level: int
    face_centered: bool
    looking_at_screen: bool
    distracted: bool
    distraction_reason: Optional[DistractionReason] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'timestamp': self.timestamp,
            'level': self.level,
            'faceCentered': self.face_centered,
            'lookingAtScreen': self.looking_at_screen,
            'distracted': self.distracted,
        }
        if self.distraction_reason is not None:
            data['distractionReason'] = self.distraction_reason.value
        return data


@dataclass(frozen=True)
class FaceLandmarksDisplay:
    """Normalized key points used by the foreground overlay."""
    left_eye: Mapping[str, float]
    right_eye: Mapping[str, float]
    mouth: Mapping[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'leftEye': dict(self.left_eye),
            'rightEye': dict(self.right_eye),
            'mouth': dict(self.mouth),
        }


@dataclass(frozen=True)
class TrackingSample:
    timestamp: int
    face_detected: bool
    blink: BlinkSample
    head_pose: HeadPoseSample
    engagement: EngagementSample
    face_landmarks: Optional[FaceLandmarksDisplay] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'timestamp': self.timestamp,
            'faceDetected': self.face_detected,
            'blink': self.blink.to_dict(),
            'headPose': self.head_pose.to_dict(),
            'engagement': self.engagement.to_dict(),
        }
        if self.face_landmarks is not None:
            data['faceLandmarks'] = self.face_landmarks.to_dict()
        return data


@dataclass(frozen=True)
class HeadPoseStats:
    average_yaw: float = 0.0
    average_pitch: float = 0.0
    average_roll: float = 0.0


@dataclass(frozen=True)
class SessionMetrics:
    """
    Summary of one session.

    ``time_fully_engaged``, ``time_partially_engaged`` and ``time_disengaged``
    are frame counts. ``time_distracted``, ``time_focused`` and
    ``time_inactive`` are seconds.
    """
    total_blinks: int = 0
    average_blink_rate: float = 0.0
    average_engagement: float = 0.0
    time_fully_engaged: int = 0
    time_partially_engaged: int = 0
    time_disengaged: int = 0
    time_distracted: float = 0.0
    time_focused: float = 0.0
    time_inactive: float = 0.0
    efficiency: float = 0.0
    head_pose_stats: HeadPoseStats = field(default_factory=HeadPoseStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalBlinks': self.total_blinks,
            'averageBlinkRate': self.average_blink_rate,
            'averageEngagement': self.average_engagement,
            'timeFullyEngaged': self.time_fully_engaged,
            'timePartiallyEngaged': self.time_partially_engaged,
            'timeDisengaged': self.time_disengaged,
            'timeDistracted': self.time_distracted,
            'timeFocused': self.time_focused,
            'timeInactive': self.time_inactive,
            'efficiency': self.efficiency,
            'headPoseStats': {
                'averageYaw': self.head_pose_stats.average_yaw,
                'averagePitch': self.head_pose_stats.average_pitch,
                'averageRoll': self.head_pose_stats.average_roll,
            },
        }


@dataclass(frozen=True)
class TrackingSession:
    id: str
    start_time: int
    end_time: Optional[int] = None
    total_duration: float = 0.0  # seconds
    metrics: SessionMetrics = field(default_factory=SessionMetrics)
    tags: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'totalDuration': self.total_duration,
            'metrics': self.metrics.to_dict(),
        }
        if self.tags:
            data['tags'] = dict(self.tags)
        return data


@dataclass(frozen=True)
class CameraStatus:
    initialized: bool = False
    active: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'initialized': self.initialized, 'active': self.active}
        if self.error:
            data['error'] = self.error
        return data
