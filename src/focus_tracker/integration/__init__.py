"""
Session Integration System

This module integrates the per-frame analysis modules:
- Frame analysis into tracking samples
- Bounded session history and session lifecycle
- Session metrics aggregation
- Finished session history

Provides the session summary used by the control surface.
"""

from .frame_analyzer import FrameAnalyzer
from .session_history import SessionHistory
from .session_metrics import reduce_session_metrics
from .session_tracker import BoundedHistory, SessionTracker

__all__ = ['FrameAnalyzer', 'SessionHistory', 'reduce_session_metrics',
           'BoundedHistory', 'SessionTracker']
