"""
MediaPipe Face Mesh landmark access.

A landmark frame is an ``(N, 3)`` float array of normalized x, y and
unitless z. The detector delivers either a complete mesh or nothing, so an
index beyond the frame is an integrity failure, never a "no face" case.
"""

import numpy as np
from typing import Iterable

from ...types import FaceLandmarksDisplay


# Six-point eye contours in EAR order: p1 corner, p2/p3 top, p4 corner, p5/p6 bottom
RIGHT_EYE_EAR_INDICES = [33, 160, 158, 133, 153, 144]
LEFT_EYE_EAR_INDICES = [362, 385, 387, 263, 373, 380]

NOSE_TIP = 1
CHIN = 152
LEFT_EYE_INNER = 133
RIGHT_EYE_INNER = 362

# Corner pairs for the overlay eye centres, named by image side
OVERLAY_LEFT_EYE = (33, 133)
OVERLAY_RIGHT_EYE = (362, 263)

MOUTH_LEFT = 61
MOUTH_RIGHT = 291
MOUTH_TOP = 13
MOUTH_BOTTOM = 14

# Nose must sit strictly inside 30%-70% of the frame on both axes; 0.3 is intended
CENTER_BAND = (0.3, 0.7)


class LandmarkIntegrityError(ValueError):
    """Raised when a frame lacks a landmark index the pipeline relies on."""


def as_landmark_array(points: Iterable) -> np.ndarray:
    """
    Convert detector output to an ``(N, 3)`` float array.

    Accepts an existing array, ``(x, y, z)`` tuples, or objects exposing
    ``.x``, ``.y`` and ``.z`` (MediaPipe ``NormalizedLandmark``).
    """
    if isinstance(points, np.ndarray):
        array = points.astype(float)
    else:
        rows = []
        for point in points:
            if hasattr(point, 'x'):
                rows.append((point.x, point.y, getattr(point, 'z', 0.0)))
            else:
                rows.append(tuple(point))
        array = np.array(rows, dtype=float)

    if array.size == 0:
        return array.reshape(0, 3)
    if array.ndim != 2 or array.shape[1] not in (2, 3):
        raise LandmarkIntegrityError(f"Expected an (N, 3) landmark array, got shape {array.shape}")
    if array.shape[1] == 2:
        array = np.hstack([array, np.zeros((len(array), 1))])
    return array


def landmark_at(landmarks: np.ndarray, index: int) -> np.ndarray:
    """Return landmark ``index`` or raise ``LandmarkIntegrityError``."""
    if index < 0 or index >= len(landmarks):
        raise LandmarkIntegrityError(
            f"Landmark {index} missing from frame of {len(landmarks)} points")
    return landmarks[index]


def select_landmarks(landmarks: np.ndarray, indices: Iterable[int]) -> np.ndarray:
    return np.array([landmark_at(landmarks, i) for i in indices])


def is_face_centered(landmarks: np.ndarray) -> bool:
    nose = landmark_at(landmarks, NOSE_TIP)
    low, high = CENTER_BAND
    return bool(low < nose[0] < high and low < nose[1] < high)


def _midpoint(landmarks: np.ndarray, pair) -> dict:
    a = landmark_at(landmarks, pair[0])
    b = landmark_at(landmarks, pair[1])
    return {'x': float((a[0] + b[0]) / 2), 'y': float((a[1] + b[1]) / 2)}


def extract_display_landmarks(landmarks: np.ndarray) -> FaceLandmarksDisplay:
    """Eye centres and the mouth box, in normalized image coordinates."""
    mouth_left = landmark_at(landmarks, MOUTH_LEFT)
    mouth_right = landmark_at(landmarks, MOUTH_RIGHT)
    mouth_top = landmark_at(landmarks, MOUTH_TOP)
    mouth_bottom = landmark_at(landmarks, MOUTH_BOTTOM)

    mouth = {
        'x': float((mouth_left[0] + mouth_right[0]) / 2),
        'y': float((mouth_top[1] + mouth_bottom[1]) / 2),
        'width': float(abs(mouth_right[0] - mouth_left[0])),
        'height': float(abs(mouth_bottom[1] - mouth_top[1])),
    }

    return FaceLandmarksDisplay(
        left_eye=_midpoint(landmarks, OVERLAY_LEFT_EYE),
        right_eye=_midpoint(landmarks, OVERLAY_RIGHT_EYE),
        mouth=mouth,
    )
