"""
Wire message model.

Two kinds of message cross the device boundary:

- ``ShortMessage``: channel voice messages (note on/off, control change,
  program change, ...), 2 or 3 bytes, status byte 0x80-0xEF.
- ``SysexMessage``: system exclusive payloads framed by 0xF0 ... 0xF7.

``WireMessage`` is the closed union of the two. Anything else the
platform delivers (clock, song position, active sensing, ...) has no
representation here and is dropped at the input boundary.

mido is the platform layer, so ``from_mido``/``to_mido`` are the only
places that know about ``mido.Message``.
"""

from dataclasses import dataclass

import mido

from midilink.exceptions import MalformedMessageTextError

from .codec import encode_hex

# Channel voice commands (high nibble of the status byte)
NOTE_OFF = 0x80
NOTE_ON = 0x90
POLY_PRESSURE = 0xA0
CONTROL_CHANGE = 0xB0
PROGRAM_CHANGE = 0xC0
CHANNEL_PRESSURE = 0xD0
PITCH_BEND = 0xE0

# System exclusive framing
SYSEX_START = 0xF0
SYSEX_END = 0xF7

# Commands that carry a single data byte
_TWO_BYTE_COMMANDS = frozenset({PROGRAM_CHANGE, CHANNEL_PRESSURE})


@dataclass(frozen=True, slots=True)
class ShortMessage:
    """Channel voice message: status byte plus up to two data bytes."""

    status: int
    data1: int = 0
    data2: int = 0

    def __post_init__(self):
        if not NOTE_OFF <= self.status <= 0xEF:
            raise MalformedMessageTextError(
                encode_hex([self.status & 0xFF]), f"status byte 0x{self.status:02x} is not a channel message"
            )
        for name, value in (("data1", self.data1), ("data2", self.data2)):
            if not 0 <= value <= 0x7F:
                raise MalformedMessageTextError(
                    encode_hex(self._raw()), f"{name} value {value} is out of range 0-127"
                )

    def _raw(self) -> list[int]:
        return [b & 0xFF for b in (self.status, self.data1, self.data2)]

    @classmethod
    def from_parts(cls, command: int, channel: int, data1: int, data2: int) -> "ShortMessage":
        """
        Build a message from separate command and channel values.

        Args:
            command: Command nibble as a status value (0x80-0xE0)
            channel: Zero-based MIDI channel (0-15)
            data1: First data byte
            data2: Second data byte
        """
        if command & 0x0F or not NOTE_OFF <= command <= PITCH_BEND:
            raise MalformedMessageTextError(
                encode_hex([b & 0xFF for b in (command, channel, data1, data2)]),
                f"command 0x{command & 0xFF:02x} is not a channel command",
            )
        if not 0 <= channel <= 0x0F:
            raise MalformedMessageTextError(
                encode_hex([b & 0xFF for b in (command, channel, data1, data2)]),
                f"channel {channel} is out of range 0-15",
            )
        return cls(command | channel, data1, data2)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ShortMessage":
        """Build a message from its 2 or 3 wire bytes."""
        if not data:
            raise MalformedMessageTextError("", "message is empty")
        needed = 2 if (data[0] & 0xF0) in _TWO_BYTE_COMMANDS else 3
        if len(data) < needed:
            raise MalformedMessageTextError(encode_hex(data), f"needs {needed} bytes")
        return cls(data[0], data[1], data[2] if needed == 3 else 0)

    @property
    def command(self) -> int:
        return self.status & 0xF0

    @property
    def channel(self) -> int:
        """Zero-based channel number (0-15)."""
        return self.status & 0x0F

    @property
    def length(self) -> int:
        return 2 if self.command in _TWO_BYTE_COMMANDS else 3

    def to_bytes(self) -> bytes:
        return bytes([self.status, self.data1, self.data2][: self.length])


@dataclass(frozen=True, slots=True)
class SysexMessage:
    """System exclusive message, stored with its framing bytes."""

    payload: bytes

    def __post_init__(self):
        if len(self.payload) < 2 or self.payload[0] != SYSEX_START or self.payload[-1] != SYSEX_END:
            raise MalformedMessageTextError(
                encode_hex(self.payload), "system exclusive messages must start with f0 and end with f7"
            )

    @property
    def data(self) -> bytes:
        """Payload without the framing bytes."""
        return self.payload[1:-1]

    def to_bytes(self) -> bytes:
        return bytes(self.payload)


WireMessage = ShortMessage | SysexMessage


def parse_wire_message(data: bytes) -> WireMessage | None:
    """
    Classify raw inbound bytes.

    Returns:
        The typed message, or None for message kinds outside WireMessage
        and for byte sequences that don't form a valid message
    """
    if not data:
        return None

    status = data[0]
    try:
        if status == SYSEX_START:
            return SysexMessage(bytes(data))
        if NOTE_OFF <= status <= 0xEF:
            return ShortMessage.from_bytes(bytes(data))
    except MalformedMessageTextError:
        return None
    return None


def from_mido(msg: mido.Message) -> WireMessage | None:
    """Convert a mido message into a WireMessage (None if unsupported)."""
    return parse_wire_message(bytes(msg.bytes()))


def to_mido(message: WireMessage) -> mido.Message:
    """Convert a WireMessage into a mido message ready to send."""
    return mido.Message.from_bytes(list(message.to_bytes()))
