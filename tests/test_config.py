"""Tests for configuration models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from midilink.exceptions import ConfigFileInvalidError, ConfigValidationError
from midilink.models import (
    AppConfig,
    ChannelConfig,
    CompatibilityConfig,
    ControlChangeConfig,
    DeviceConfig,
)


@pytest.mark.unit
class TestNodeConfigs:
    """Test validation of node configuration."""

    @pytest.mark.parametrize("channel", [1, 16])
    def test_channel_bounds(self, channel):
        assert ChannelConfig(channel=channel).channel == channel

    @pytest.mark.parametrize("channel", [0, 17])
    def test_channel_out_of_range(self, channel):
        with pytest.raises(ValidationError):
            ChannelConfig(channel=channel)

    @pytest.mark.parametrize("cc_number", [-1, 128])
    def test_cc_number_out_of_range(self, cc_number):
        with pytest.raises(ValidationError):
            ControlChangeConfig(cc_number=cc_number)

    def test_device_id_required(self):
        with pytest.raises(ValidationError):
            DeviceConfig(device_id="")


@pytest.mark.unit
class TestAppConfig:
    """Test application config defaults and persistence."""

    def test_defaults(self):
        config = AppConfig()
        assert config.device_id is None
        assert config.log_level == "WARNING"
        assert config.compatibility == CompatibilityConfig()
        assert not config.compatibility.invert_channel_length_check
        assert not config.compatibility.stop_discovery_re_adds_listener

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        assert AppConfig.load_or_default(tmp_path / "config.json") == AppConfig()

    def test_save_and_load(self, tmp_path: Path):
        path = tmp_path / "config.json"
        config = AppConfig(
            device_id="TestSynth",
            log_level="DEBUG",
            compatibility=CompatibilityConfig(invert_channel_length_check=True),
        )

        config.save(path)

        assert json.loads(path.read_text())["device_id"] == "TestSynth"
        assert AppConfig.load_or_default(path) == config

    def test_partial_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text('{"compatibility": {"stop_discovery_re_adds_listener": true}}')

        config = AppConfig.load_or_default(path)

        assert config.compatibility.stop_discovery_re_adds_listener
        assert not config.compatibility.invert_channel_length_check
        assert config.device_id is None

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigFileInvalidError):
            AppConfig.load_or_default(path)

    def test_invalid_value(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text('{"log_level": "LOUD"}')

        with pytest.raises(ConfigValidationError) as exc_info:
            AppConfig.load_or_default(path)
        assert exc_info.value.field == "log_level"
