"""MIDI device exceptions.

This module defines exceptions for MIDI device errors:
- MidiDeviceError: Base class for MIDI device errors
- DeviceUnavailableError: Device could not be opened
"""

from .base import MidiLinkError


class MidiDeviceError(MidiLinkError):
    """MIDI device initialization or operation failed."""

    def __init__(self, user_message: str, device_id: str | None = None, **kwargs):
        """
        Initialize MIDI device error.

        Args:
            user_message: User-friendly error message
            device_id: The device that failed (if applicable)
        """
        super().__init__(user_message, **kwargs)
        self.device_id = device_id


class DeviceUnavailableError(MidiDeviceError):
    """The platform could not open any endpoint of a MIDI device."""

    def __init__(self, device_id: str, original_error: str | None = None):
        """
        Initialize device-unavailable error.

        Args:
            device_id: Name of the device that could not be opened
            original_error: The original error message from the MIDI backend
        """
        user_msg = f"Unable to open MIDI device '{device_id}'"
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        recovery = (
            "Check that the device is plugged in and not in use by another application. "
            "Run 'midilink devices list' to see available devices."
        )

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            device_id=device_id,
            recoverable=True,
            recovery_hint=recovery,
        )
        self.original_error = original_error
