"""Configuration models."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from midilink.utils.persistence import PydanticPersistence

DEFAULT_CONFIG_PATH = Path.home() / ".midilink" / "config.json"


class DeviceConfig(BaseModel):
    """Configuration of a device node."""

    device_id: str = Field(min_length=1, description="Exact MIDI port name of the device")


class ChannelConfig(BaseModel):
    """Configuration of a MIDI channel node."""

    channel: int = Field(ge=1, le=16, description="MIDI channel number (1-16)")


class ControlChangeConfig(BaseModel):
    """Configuration of a control change node."""

    cc_number: int = Field(ge=0, le=127, description="Control change number (0-127)")


class CompatibilityConfig(BaseModel):
    """Switches that reproduce legacy driver behavior."""

    invert_channel_length_check: bool = Field(
        default=False,
        description=(
            "Legacy transmit guard: only send channel messages whose byte count is "
            "outside 3-4 and reject 3 or 4 byte messages"
        ),
    )
    stop_discovery_re_adds_listener: bool = Field(
        default=False,
        description=(
            "Legacy discovery stop: re-register the discovery listener instead of "
            "removing it, so discovery keeps running"
        ),
    )


class AppConfig(BaseModel):
    """Application configuration and settings."""

    device_id: str | None = Field(
        default=None, description="Default MIDI device for commands that take a device"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING", description="Log level for file logging"
    )
    compatibility: CompatibilityConfig = Field(
        default_factory=CompatibilityConfig,
        description="Legacy behavior switches",
    )

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.midilink/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return PydanticPersistence.load_json_or_default(path or DEFAULT_CONFIG_PATH, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or DEFAULT_CONFIG_PATH)
