"""
Session Metrics Aggregation

Reduces the ordered sample history of a session into its summary metrics.
"""

from typing import Sequence

import numpy as np

from ..types import DistractionReason, HeadPoseStats, SessionMetrics, TrackingSample


# Longest gap credited to a single frame, seconds
MAX_FRAME_DURATION = 5.0
# Duration credited to the last frame, which has no successor
LAST_FRAME_DURATION = 1.0

FULLY_ENGAGED_ABOVE = 80
PARTIALLY_ENGAGED_FROM = 40


def frame_durations(history: Sequence[TrackingSample]) -> np.ndarray:
    """Seconds from each sample to the next, within [0, 5]; the last sample gets one second."""
    if not history:
        return np.zeros(0)

    timestamps = np.array([sample.timestamp for sample in history], dtype=float)
    gaps = np.diff(timestamps) / 1000.0
    # Out-of-order neighbours count as a zero gap
    gaps = np.clip(gaps, 0.0, MAX_FRAME_DURATION)
    return np.append(gaps, LAST_FRAME_DURATION)


def reduce_session_metrics(history: Sequence[TrackingSample],
                           total_session_duration: float) -> SessionMetrics:
    """
    Compute session metrics from the full sample history.

    Args:
        history: Samples in timestamp order
        total_session_duration: Wall-clock session length in seconds

    Returns:
        Session metrics. Engagement buckets are frame counts while the
        distracted, focused and inactive figures are seconds.
    """
    if not history:
        return SessionMetrics()

    durations = frame_durations(history)

    time_distracted = 0.0
    time_inactive = 0.0
    time_fully_engaged = 0
    time_partially_engaged = 0
    time_disengaged = 0
    total_blinks = 0

    for sample, duration in zip(history, durations):
        engagement = sample.engagement
        total_blinks = max(total_blinks, sample.blink.blink_count)

        if engagement.distracted:
            time_distracted += duration
            if engagement.distraction_reason == DistractionReason.FACE_NOT_DETECTED:
                time_inactive += duration

        if engagement.distracted or engagement.level < PARTIALLY_ENGAGED_FROM:
            time_disengaged += 1
        elif engagement.level > FULLY_ENGAGED_ABOVE:
            time_fully_engaged += 1
        else:
            time_partially_engaged += 1

    levels = np.array([sample.engagement.level for sample in history], dtype=float)
    poses = np.array([(s.head_pose.yaw, s.head_pose.pitch, s.head_pose.roll) for s in history],
                     dtype=float)
    average_yaw, average_pitch, average_roll = poses.mean(axis=0)

    time_focused = max(0.0, total_session_duration - time_distracted)

    if total_session_duration > 0:
        efficiency = time_focused / total_session_duration * 100
        average_blink_rate = total_blinks / total_session_duration * 60
    else:
        efficiency = 0.0
        average_blink_rate = 0.0

    return SessionMetrics(
        total_blinks=int(total_blinks),
        average_blink_rate=float(average_blink_rate),
        average_engagement=float(levels.mean()),
        time_fully_engaged=time_fully_engaged,
        time_partially_engaged=time_partially_engaged,
        time_disengaged=time_disengaged,
        time_distracted=float(time_distracted),
        time_focused=float(time_focused),
        time_inactive=float(time_inactive),
        efficiency=float(efficiency),
        head_pose_stats=HeadPoseStats(
            average_yaw=float(average_yaw),
            average_pitch=float(average_pitch),
            average_roll=float(average_roll),
        ),
    )
