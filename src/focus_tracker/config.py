"""
Configuration for the focus tracker.

Tracking thresholds live in an immutable ``TrackingSettings`` record. The
application configuration is a nested dictionary loaded from YAML and
completed from ``get_default_config()``.
"""

import copy
import logging
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class SettingsValidationError(ValueError):
    """Raised when a tracking setting lies outside its accepted range."""


@dataclass(frozen=True)
class TrackingSettings:
    blink_threshold: float = 0.2
    yaw_threshold: float = 30.0
    pitch_up_threshold: float = 20.0
    pitch_down_threshold: float = 25.0
    fps_background: int = 15
    fps_active: int = 30
    camera_enabled: bool = True

    def validate(self) -> 'TrackingSettings':
        """Check every threshold against its sane range and return self."""
        for name in ('blink_threshold', 'yaw_threshold', 'pitch_up_threshold', 'pitch_down_threshold'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise SettingsValidationError(f"{name} must be a number, got {value!r}")

        for name in ('fps_background', 'fps_active'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise SettingsValidationError(f"{name} must be an integer, got {value!r}")

        if not isinstance(self.camera_enabled, bool):
            raise SettingsValidationError(f"camera_enabled must be true or false, got {self.camera_enabled!r}")

        if not 0.0 < self.blink_threshold < 1.0:
            raise SettingsValidationError(
                f"blink_threshold must be in (0, 1), got {self.blink_threshold}")

        for name in ('yaw_threshold', 'pitch_up_threshold', 'pitch_down_threshold'):
            value = getattr(self, name)
            if not 0.0 < value <= 90.0:
                raise SettingsValidationError(f"{name} must be in (0, 90], got {value}")

        for name in ('fps_background', 'fps_active'):
            value = getattr(self, name)
            if not 1 <= value <= 120:
                raise SettingsValidationError(f"{name} must be in [1, 120], got {value}")

        return self

    def merged(self, **changes) -> 'TrackingSettings':
        """Return a validated copy with ``changes`` applied."""
        unknown = set(changes) - set(asdict(self))
        if unknown:
            raise SettingsValidationError(f"Unknown settings: {sorted(unknown)}")
        return replace(self, **changes).validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_SETTINGS = TrackingSettings()


def get_default_config() -> Dict[str, Any]:
    """Get default configuration for the system."""
    return {
        'tracking': DEFAULT_SETTINGS.to_dict(),
        'session': {
            'history_capacity': 1000,
            'watchdog_interval': 1.0,
            'watchdog_timeout': 2.0,
        },
        'camera': {
            'device_id': 0,
            'width': 640,
            'height': 480,
            'model_path': 'models/face_landmarker.task',
        },
        'logging': {
            'level': 'INFO',
            'log_file': None,
        },
    }


def _merge_defaults(defaults: Dict[str, Any], loaded: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in loaded.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from a YAML file, filling gaps from the defaults."""
    if config_path is None:
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Config file {config_path} not found, using default configuration")
        return get_default_config()
    except yaml.YAMLError as e:
        logger.error(f"Error loading config: {e}")
        return get_default_config()

    if not isinstance(loaded, dict):
        logger.error(f"Config file {config_path} does not contain a mapping, using defaults")
        return get_default_config()

    return _merge_defaults(get_default_config(), loaded)


def settings_from_config(config: Dict[str, Any]) -> TrackingSettings:
    """Build validated tracking settings from the ``tracking`` section."""
    section = config.get('tracking') or {}
    return DEFAULT_SETTINGS.merged(**section)
