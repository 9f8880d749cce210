"""
Eye Aspect Ratio (EAR) Calculator

Implements the Eye Aspect Ratio calculation for blink detection.
Based on the paper "Real-Time Eye Blink Detection using Facial Landmarks"
by Soukupová and Čech.
"""

import numpy as np

from .landmarks import LEFT_EYE_EAR_INDICES, RIGHT_EYE_EAR_INDICES, select_landmarks


def calculate_eye_aspect_ratio(eye_landmarks: np.ndarray) -> float:
    """
    Calculate the Eye Aspect Ratio (EAR) for a given set of eye landmarks.

    The EAR is calculated as:
    EAR = (|p2-p6| + |p3-p5|) / (2 * |p1-p4|)

    Where p1-p6 are the 6 eye landmark points in order:
    p1, p4: horizontal eye corners
    p2, p3, p5, p6: vertical eye points

    Args:
        eye_landmarks: Array of 6 eye landmark points [(x, y, z), ...]

    Returns:
        Eye aspect ratio value (typically 0.2-0.4 for open eyes, <0.2 for closed)
    """
    if len(eye_landmarks) < 6:
        raise ValueError(f"Expected 6 eye landmarks, got {len(eye_landmarks)}")

    p1, p2, p3, p4, p5, p6 = eye_landmarks[:6]

    vertical_1 = euclidean_distance(p2, p6)
    vertical_2 = euclidean_distance(p3, p5)
    horizontal = euclidean_distance(p1, p4)

    # Degenerate contour
    if horizontal == 0:
        return 0.0

    return (vertical_1 + vertical_2) / (2.0 * horizontal)


def euclidean_distance(point1: np.ndarray, point2: np.ndarray) -> float:
    """Calculate euclidean distance between two 3D points."""
    return float(np.linalg.norm(np.asarray(point1, dtype=float) - np.asarray(point2, dtype=float)))


def average_eye_aspect_ratio(landmarks: np.ndarray) -> float:
    """Mean EAR of both eyes for a full face mesh frame."""
    right_ear = calculate_eye_aspect_ratio(select_landmarks(landmarks, RIGHT_EYE_EAR_INDICES))
    left_ear = calculate_eye_aspect_ratio(select_landmarks(landmarks, LEFT_EYE_EAR_INDICES))
    return (right_ear + left_ear) / 2.0
