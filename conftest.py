"""
Shared fixtures: synthetic face mesh frames, a scriptable landmark source and
a manual clock.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from focus_tracker.real_time.landmark_source import CapabilityUnavailableError, LandmarkSource  # noqa: E402


MESH_SIZE = 478
EYE_LINE_Y = 0.40
EYE_WIDTH = 0.06
FACE_HEIGHT = 0.40


def make_landmarks(ear=0.3, yaw=0.0, pitch=0.0, offset=(0.0, 0.0)):
    """
    Build a full face mesh whose geometry yields the requested averaged EAR,
    yaw and pitch. ``offset`` translates the whole face, which changes
    centering but not the angles.
    """
    frame = np.full((MESH_SIZE, 3), 0.5)
    frame[:, 2] = 0.0

    def place_eye(indices, left_x):
        p1, p2, p3, p4, p5, p6 = indices
        half_open = ear * EYE_WIDTH / 2
        frame[p1] = (left_x, EYE_LINE_Y, 0.0)
        frame[p4] = (left_x + EYE_WIDTH, EYE_LINE_Y, 0.0)
        frame[p2] = (left_x + 0.02, EYE_LINE_Y - half_open, 0.0)
        frame[p6] = (left_x + 0.02, EYE_LINE_Y + half_open, 0.0)
        frame[p3] = (left_x + 0.04, EYE_LINE_Y - half_open, 0.0)
        frame[p5] = (left_x + 0.04, EYE_LINE_Y + half_open, 0.0)

    # Inner corners 133 and 362 end up at x=0.46 and x=0.54
    place_eye([33, 160, 158, 133, 153, 144], 0.40)
    place_eye([362, 385, 387, 263, 373, 380], 0.54)

    eye_distance = 0.08
    frame[1] = (0.5 + yaw / 60.0 * eye_distance, EYE_LINE_Y + (pitch / 90.0 + 0.4) * FACE_HEIGHT, 0.0)
    frame[152] = (0.5, EYE_LINE_Y + FACE_HEIGHT, 0.0)

    frame[61] = (0.45, 0.70, 0.0)
    frame[291] = (0.55, 0.70, 0.0)
    frame[13] = (0.50, 0.68, 0.0)
    frame[14] = (0.50, 0.72, 0.0)

    frame[:, 0] += offset[0]
    frame[:, 1] += offset[1]
    return frame


class FakeLandmarkSource(LandmarkSource):
    """Landmark source driven by the test through ``push``."""

    def __init__(self, fail_configure=False, fail_start=False):
        super().__init__()
        self.fail_configure = fail_configure
        self.fail_start = fail_start
        self.options = []
        self.started = False
        self.stop_calls = 0

    def configure(self, options):
        if self.fail_configure:
            raise CapabilityUnavailableError("model file missing")
        self.options.append(dict(options))

    def start(self):
        if self.fail_start:
            raise CapabilityUnavailableError("camera busy")
        self.started = True

    def stop(self):
        self.started = False
        self.stop_calls += 1

    def push(self, landmarks, timestamp):
        self.emit(landmarks, timestamp)


class ManualClock:
    """Millisecond clock advanced explicitly by the test."""

    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


@pytest.fixture
def landmark_factory():
    return make_landmarks


@pytest.fixture
def fake_source():
    return FakeLandmarkSource()


@pytest.fixture
def clock():
    return ManualClock()
