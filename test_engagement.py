"""
Tests for engagement classification and per-frame sample assembly.
"""

import itertools

import pytest

from focus_tracker.config import TrackingSettings
from focus_tracker.integration import FrameAnalyzer
from focus_tracker.modules.engagement import EngagementClassifier, face_not_detected_sample
from focus_tracker.modules.geometry import LandmarkIntegrityError
from focus_tracker.types import BlinkSample, DistractionReason, HeadPoseSample


def pose(yaw=0.0, pitch=0.0):
    return HeadPoseSample(timestamp=0, yaw=yaw, pitch=pitch, roll=0.0)


def blink(rate=0):
    return BlinkSample(timestamp=0, eye_aspect_ratio=0.3, blink_detected=False,
                       blink_count=0, average_blink_rate=rate)


@pytest.fixture
def classifier():
    return EngagementClassifier(TrackingSettings())


def test_distracted_frames_score_zero(classifier):
    yaws = [-60.0, -31.0, 0.0, 29.0, 45.0]
    pitches = [-40.0, -21.0, 0.0, 24.0, 26.0]
    for yaw, pitch, centered, rate in itertools.product(yaws, pitches, [True, False], [0, 15]):
        sample = classifier.classify(pose(yaw, pitch), blink(rate), centered, 0)
        if sample.distracted:
            assert sample.level == 0
        assert 0 <= sample.level <= 100


def test_head_turned_takes_precedence(classifier):
    sample = classifier.classify(pose(yaw=45.0, pitch=40.0), blink(), True, 0)
    assert sample.distraction_reason == DistractionReason.HEAD_TURNED
    assert not sample.looking_at_screen


def test_looking_up_and_down(classifier):
    up = classifier.classify(pose(pitch=-25.0), blink(), True, 0)
    down = classifier.classify(pose(pitch=30.0), blink(), True, 0)
    assert up.distraction_reason == DistractionReason.LOOKING_AWAY
    assert down.distraction_reason == DistractionReason.LOOKING_AWAY


def test_thresholds_are_strict(classifier):
    sample = classifier.classify(pose(yaw=30.0, pitch=25.0), blink(), True, 0)
    assert not sample.distracted
    assert sample.distraction_reason is None


def test_score_components(classifier):
    assert classifier.classify(pose(), blink(15), True, 0).level == 100
    assert classifier.classify(pose(), blink(0), True, 0).level == 80
    assert classifier.classify(pose(), blink(15), False, 0).level == 60
    assert classifier.classify(pose(), blink(10), False, 0).level == 40
    assert classifier.classify(pose(), blink(30), True, 0).level == 80


def test_updated_thresholds_apply():
    classifier = EngagementClassifier(TrackingSettings())
    classifier.update_settings(TrackingSettings(yaw_threshold=50.0))
    assert not classifier.classify(pose(yaw=45.0), blink(), True, 0).distracted


def test_face_not_detected_sample():
    sample = face_not_detected_sample(1234)
    assert sample.distracted and sample.level == 0
    assert sample.to_dict()['distractionReason'] == 'face_not_detected'


def test_analyzer_builds_full_sample(landmark_factory):
    analyzer = FrameAnalyzer(TrackingSettings())
    sample = analyzer.analyze(landmark_factory(), 1000)

    assert sample.face_detected
    assert sample.engagement.level == 80
    assert sample.face_landmarks is not None
    data = sample.to_dict()
    assert set(data) == {'timestamp', 'faceDetected', 'blink', 'headPose', 'engagement', 'faceLandmarks'}
    assert 'distractionReason' not in data['engagement']


def test_analyzer_without_face():
    analyzer = FrameAnalyzer(TrackingSettings())
    sample = analyzer.analyze(None, 1000)

    assert not sample.face_detected
    assert sample.face_landmarks is None
    assert sample.engagement.distraction_reason == DistractionReason.FACE_NOT_DETECTED
    assert (sample.head_pose.yaw, sample.head_pose.pitch, sample.head_pose.roll) == (0.0, 0.0, 0.0)


def test_analyzer_counts_blinks_and_resets(landmark_factory):
    analyzer = FrameAnalyzer(TrackingSettings())
    analyzer.analyze(landmark_factory(ear=0.3), 0)
    sample = analyzer.analyze(landmark_factory(ear=0.1), 100)
    assert sample.blink.blink_count == 1

    analyzer.reset()
    assert analyzer.analyze(landmark_factory(ear=0.3), 200).blink.blink_count == 0


def test_incomplete_frame_does_not_advance_blinks(landmark_factory):
    analyzer = FrameAnalyzer(TrackingSettings())
    frame = landmark_factory(ear=0.1)
    with pytest.raises(LandmarkIntegrityError):
        analyzer.analyze(frame[:200], 0)
    assert analyzer.blink_detector.blink_count == 0


def test_analyzer_follows_settings(landmark_factory):
    analyzer = FrameAnalyzer(TrackingSettings())
    analyzer.update_settings(TrackingSettings(blink_threshold=0.35))
    assert analyzer.analyze(landmark_factory(ear=0.3), 0).blink.blink_detected
