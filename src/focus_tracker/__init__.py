"""
Focus Tracker

Per-frame blink, head pose and engagement analysis from face landmarks,
aggregated into per-session focus metrics.
"""

from .config import TrackingSettings, load_config
from .integration import FrameAnalyzer, SessionHistory, SessionTracker
from .types import SessionMetrics, TrackingSample, TrackingSession

__version__ = "0.1.0"

__all__ = [
    'TrackingSettings', 'load_config', 'FrameAnalyzer', 'SessionHistory',
    'SessionTracker', 'SessionMetrics', 'TrackingSample', 'TrackingSession',
]
