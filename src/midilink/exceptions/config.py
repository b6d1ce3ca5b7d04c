"""Errors raised while loading or saving ~/.midilink/config.json."""

from typing import Any

from .base import MidiLinkError

# Extra advice for fields whose valid range is not obvious from the message
_FIELD_HINTS = {
    "device_id": "Run 'midilink devices list' to see the names of connected MIDI devices",
    "channel": "MIDI channels are numbered 1 to 16",
    "cc_number": "Control change numbers range from 0 to 127",
    "log_level": "Use one of DEBUG, INFO, WARNING or ERROR",
}


class ConfigurationError(MidiLinkError):
    """Configuration is invalid or cannot be loaded."""
    pass


class ConfigFileInvalidError(ConfigurationError):
    """The config file is empty or is not valid JSON."""

    def __init__(self, file_path: str, parse_error: str):
        super().__init__(
            user_message=f"Could not read configuration file {file_path}",
            technical_message=f"Invalid JSON in {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=(
                f"Fix the JSON in {file_path} ({parse_error}) "
                "or delete the file to start from the defaults"
            ),
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """A config value is well formed JSON but out of range or of the wrong type."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        hint = f"Change '{field}'"
        if file_path:
            hint += f" in {file_path}"
        leaf = field.rsplit(".", 1)[-1]
        if leaf in _FIELD_HINTS:
            hint += f". {_FIELD_HINTS[leaf]}"

        super().__init__(
            user_message=f"Invalid configuration value for '{field}': {error_msg}",
            technical_message=f"{field}={value!r} rejected: {error_msg}",
            recoverable=True,
            recovery_hint=hint,
        )
        self.field = field
        self.value = value
        self.file_path = file_path
