"""
Facial Geometry Module

Pure functions turning a face mesh landmark frame into eye aspect ratio,
head pose angles, face centering and overlay key points.
"""

from .ear_calculator import average_eye_aspect_ratio, calculate_eye_aspect_ratio
from .landmarks import (
    LandmarkIntegrityError,
    as_landmark_array,
    extract_display_landmarks,
    is_face_centered,
)
from .pose_calculator import estimate_pose_from_landmarks

__all__ = [
    'LandmarkIntegrityError',
    'as_landmark_array',
    'average_eye_aspect_ratio',
    'calculate_eye_aspect_ratio',
    'estimate_pose_from_landmarks',
    'extract_display_landmarks',
    'is_face_centered',
]
