"""
Real-time Module

Capture and control actors, the channels joining them, and the landmark
source capability. The MediaPipe adapter lives in ``mediapipe_source`` and
is imported on demand.
"""

from .capture_actor import CaptureActor
from .channels import Channel, Message, MessageKind
from .command_relay import CommandRelay
from .control_actor import ControlActor
from .landmark_source import CapabilityUnavailableError, LandmarkSource
from .watchdog import PeriodicTask

__all__ = [
    'CaptureActor', 'Channel', 'Message', 'MessageKind', 'CommandRelay',
    'ControlActor', 'CapabilityUnavailableError', 'LandmarkSource', 'PeriodicTask',
]
