"""
Tests for the facial geometry functions.
"""

from types import SimpleNamespace

import numpy as np
import pytest

from focus_tracker.modules.geometry import (
    LandmarkIntegrityError,
    as_landmark_array,
    average_eye_aspect_ratio,
    calculate_eye_aspect_ratio,
    estimate_pose_from_landmarks,
    extract_display_landmarks,
    is_face_centered,
)
from focus_tracker.modules.geometry.landmarks import NOSE_TIP, landmark_at


def test_ear_is_non_negative_for_random_contours():
    rng = np.random.default_rng(0)
    for _ in range(200):
        eye = rng.uniform(-1.0, 1.0, size=(6, 3))
        assert calculate_eye_aspect_ratio(eye) >= 0.0


def test_ear_is_scale_invariant():
    rng = np.random.default_rng(1)
    eye = rng.uniform(0.0, 1.0, size=(6, 3))
    assert calculate_eye_aspect_ratio(eye * 3.7) == pytest.approx(calculate_eye_aspect_ratio(eye))


def test_ear_of_degenerate_contour_is_zero():
    eye = np.array([[0.5, 0.5, 0.0], [0.5, 0.4, 0.0], [0.5, 0.4, 0.0],
                    [0.5, 0.5, 0.0], [0.5, 0.6, 0.0], [0.5, 0.6, 0.0]])
    assert calculate_eye_aspect_ratio(eye) == 0.0


def test_ear_needs_six_points():
    with pytest.raises(ValueError):
        calculate_eye_aspect_ratio(np.zeros((5, 3)))


def test_ear_uses_depth():
    flat = np.array([[0, 0, 0], [1, 1, 0], [2, 1, 0], [3, 0, 0], [2, -1, 0], [1, -1, 0]], dtype=float)
    deep = flat.copy()
    deep[1, 2] = 1.0
    assert calculate_eye_aspect_ratio(deep) > calculate_eye_aspect_ratio(flat)


def test_average_ear_matches_synthetic_openness(landmark_factory):
    assert average_eye_aspect_ratio(landmark_factory(ear=0.3)) == pytest.approx(0.3)
    assert average_eye_aspect_ratio(landmark_factory(ear=0.1)) == pytest.approx(0.1)


def test_missing_landmark_raises_integrity_error(landmark_factory):
    truncated = landmark_factory()[:300]
    with pytest.raises(LandmarkIntegrityError):
        average_eye_aspect_ratio(truncated)
    with pytest.raises(LandmarkIntegrityError):
        landmark_at(truncated, 362)


def test_integrity_error_is_a_value_error():
    assert issubclass(LandmarkIntegrityError, ValueError)


def test_neutral_pose(landmark_factory):
    yaw, pitch, roll = estimate_pose_from_landmarks(landmark_factory())
    assert yaw == pytest.approx(0.0)
    assert pitch == pytest.approx(0.0)
    assert roll == pytest.approx(0.0)


def test_pose_follows_nose(landmark_factory):
    yaw, pitch, _ = estimate_pose_from_landmarks(landmark_factory(yaw=45.0, pitch=-20.0))
    assert yaw == pytest.approx(45.0)
    assert pitch == pytest.approx(-20.0)


def test_pose_is_clamped(landmark_factory):
    frame = landmark_factory()
    frame[NOSE_TIP, 0] = 0.9
    frame[NOSE_TIP, 1] = 2.0
    yaw, pitch, _ = estimate_pose_from_landmarks(frame)
    assert yaw == 90.0
    assert pitch == 90.0


def test_pose_with_zero_denominators_is_zero(landmark_factory):
    frame = landmark_factory()
    frame[362, 0] = frame[133, 0]
    frame[152, 1] = 0.40
    yaw, pitch, _ = estimate_pose_from_landmarks(frame)
    assert yaw == 0.0
    assert pitch == 0.0


def test_roll_follows_eye_line(landmark_factory):
    frame = landmark_factory()
    frame[362, 1] = frame[133, 1] + 0.08
    _, _, roll = estimate_pose_from_landmarks(frame)
    assert roll == pytest.approx(45.0)


def test_face_centering_band(landmark_factory):
    assert is_face_centered(landmark_factory())
    assert not is_face_centered(landmark_factory(offset=(0.3, 0.0)))

    frame = landmark_factory()
    frame[NOSE_TIP, 0] = 0.3
    assert not is_face_centered(frame)
    frame[NOSE_TIP, 0] = 0.31
    assert is_face_centered(frame)


def test_display_landmarks(landmark_factory):
    display = extract_display_landmarks(landmark_factory())
    assert display.left_eye['x'] == pytest.approx(0.43)
    assert display.right_eye['x'] == pytest.approx(0.57)
    assert display.mouth == pytest.approx({'x': 0.5, 'y': 0.70, 'width': 0.10, 'height': 0.04})
    assert set(display.to_dict()) == {'leftEye', 'rightEye', 'mouth'}


def test_as_landmark_array_accepts_detector_objects():
    points = [SimpleNamespace(x=0.1, y=0.2, z=0.3), SimpleNamespace(x=0.4, y=0.5, z=0.6)]
    array = as_landmark_array(points)
    assert array.shape == (2, 3)
    assert array[1].tolist() == pytest.approx([0.4, 0.5, 0.6])


def test_as_landmark_array_pads_depth_and_rejects_bad_shapes():
    padded = as_landmark_array([(0.1, 0.2), (0.3, 0.4)])
    assert padded.shape == (2, 3)
    assert padded[:, 2].tolist() == [0.0, 0.0]
    assert as_landmark_array([]).shape == (0, 3)

    with pytest.raises(LandmarkIntegrityError):
        as_landmark_array(np.zeros((4, 5)))
