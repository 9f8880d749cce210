"""
Tests for tracking settings and YAML configuration loading.
"""

from pathlib import Path

import pytest

from focus_tracker.config import (
    DEFAULT_SETTINGS,
    SettingsValidationError,
    TrackingSettings,
    get_default_config,
    load_config,
    settings_from_config,
)


def test_defaults_are_valid():
    assert DEFAULT_SETTINGS.validate() is DEFAULT_SETTINGS
    assert DEFAULT_SETTINGS.blink_threshold == 0.2
    assert DEFAULT_SETTINGS.yaw_threshold == 30.0


@pytest.mark.parametrize('changes', [
    {'blink_threshold': 0.0},
    {'blink_threshold': 1.5},
    {'yaw_threshold': -5.0},
    {'pitch_up_threshold': 95.0},
    {'fps_active': 0},
    {'fps_background': 500},
])
def test_out_of_range_settings_are_rejected(changes):
    with pytest.raises(SettingsValidationError):
        DEFAULT_SETTINGS.merged(**changes)


def test_unknown_settings_are_rejected():
    with pytest.raises(SettingsValidationError):
        DEFAULT_SETTINGS.merged(sensitivity=3)


def test_merged_returns_new_settings():
    updated = DEFAULT_SETTINGS.merged(yaw_threshold=45.0)
    assert updated.yaw_threshold == 45.0
    assert DEFAULT_SETTINGS.yaw_threshold == 30.0
    assert updated.to_dict()['yaw_threshold'] == 45.0


def test_missing_config_file_uses_defaults(tmp_path):
    assert load_config(str(tmp_path / 'absent.yaml')) == get_default_config()
    assert load_config(None) == get_default_config()


def test_partial_config_is_completed(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text("tracking:\n  yaw_threshold: 40.0\ncamera:\n  device_id: 2\n")

    config = load_config(str(path))

    assert config['tracking']['yaw_threshold'] == 40.0
    assert config['tracking']['blink_threshold'] == 0.2
    assert config['camera']['device_id'] == 2
    assert config['camera']['width'] == 640
    assert config['session']['history_capacity'] == 1000
    assert settings_from_config(config) == TrackingSettings(yaw_threshold=40.0)


def test_malformed_config_uses_defaults(tmp_path):
    path = tmp_path / 'broken.yaml'
    path.write_text("tracking: [unclosed\n")
    assert load_config(str(path)) == get_default_config()


def test_non_mapping_config_uses_defaults(tmp_path):
    path = tmp_path / 'list.yaml'
    path.write_text("- 1\n- 2\n")
    assert load_config(str(path)) == get_default_config()


def test_invalid_tracking_section_raises():
    config = get_default_config()
    config['tracking']['blink_threshold'] = 2.0
    with pytest.raises(SettingsValidationError):
        settings_from_config(config)


def test_shipped_config_loads():
    path = Path(__file__).parent / 'config' / 'settings.yaml'
    config = load_config(str(path))
    assert config == get_default_config()
    assert settings_from_config(config) == DEFAULT_SETTINGS


@pytest.mark.parametrize('changes', [
    {'blink_threshold': '0.2'},
    {'yaw_threshold': None},
    {'fps_active': 30.5},
    {'fps_background': True},
    {'camera_enabled': 'yes'},
])
def test_wrongly_typed_settings_are_rejected(changes):
    with pytest.raises(SettingsValidationError):
        DEFAULT_SETTINGS.merged(**changes)


def test_quoted_yaml_value_is_a_validation_error(tmp_path):
    path = tmp_path / 'quoted.yaml'
    path.write_text('tracking:\n  blink_threshold: "0.2"\n')
    with pytest.raises(SettingsValidationError):
        settings_from_config(load_config(str(path)))
