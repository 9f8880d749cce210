"""
Blink Detection Module

This module provides edge-triggered blink counting and a windowed
blinks-per-minute estimate driven by the eye aspect ratio.
"""

from .blink_detector import BlinkDetector, create_blink_detector

__all__ = ['BlinkDetector', 'create_blink_detector']
