"""
Head Pose Calculation Utilities

Geometric head pose from normalized face mesh landmarks. No per-user
calibration: the same landmark mapping and constants apply to every face.
"""

import math
from typing import Tuple

import numpy as np

from .landmarks import CHIN, LEFT_EYE_INNER, NOSE_TIP, RIGHT_EYE_INNER, landmark_at


# Degrees reached when the nose sits one inter-eye distance off centre
YAW_SCALE = 60.0
PITCH_SCALE = 90.0
# Relative nose height on the eye-to-chin span when looking straight ahead
NEUTRAL_NOSE_POSITION = 0.4
ANGLE_LIMIT = 90.0


def clamp_angle(angle: float, limit: float = ANGLE_LIMIT) -> float:
    return max(-limit, min(limit, float(angle)))


def estimate_pose_from_landmarks(landmarks: np.ndarray) -> Tuple[float, float, float]:
    """
    Estimate head pose from facial landmarks using geometric approach.

    Args:
        landmarks: Face mesh landmarks, shape (N, 3)

    Returns:
        Tuple of (yaw, pitch, roll) in degrees, each clamped to [-90, 90].
        Negative yaw is a turn to the left, positive pitch is a nod down.
    """
    nose = landmark_at(landmarks, NOSE_TIP)
    chin = landmark_at(landmarks, CHIN)
    left_inner = landmark_at(landmarks, LEFT_EYE_INNER)
    right_inner = landmark_at(landmarks, RIGHT_EYE_INNER)

    eye_center = (left_inner[:2] + right_inner[:2]) / 2

    # Calculate yaw (horizontal rotation)
    eye_distance = abs(right_inner[0] - left_inner[0])
    if eye_distance > 0:
        yaw = (nose[0] - eye_center[0]) / eye_distance * YAW_SCALE
    else:
        yaw = 0.0

    # Calculate pitch (vertical rotation)
    face_height = abs(chin[1] - eye_center[1])
    if face_height > 0:
        nose_position = (nose[1] - eye_center[1]) / face_height
        pitch = (nose_position - NEUTRAL_NOSE_POSITION) * PITCH_SCALE
    else:
        pitch = 0.0

    # Calculate roll (tilt rotation)
    eye_diff = right_inner[:2] - left_inner[:2]
    roll = math.degrees(math.atan2(eye_diff[1], eye_diff[0]))

    return clamp_angle(yaw), clamp_angle(pitch), clamp_angle(roll)
