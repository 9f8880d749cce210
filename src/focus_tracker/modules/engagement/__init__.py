"""
Engagement Recognition Module

This module turns head pose, face centering and blink cadence into a
distraction verdict and an engagement level between 0 and 100.
"""

from .engagement_classifier import EngagementClassifier, face_not_detected_sample

__all__ = ['EngagementClassifier', 'face_not_detected_sample']
