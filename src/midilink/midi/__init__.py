"""MIDI device driver: codec, message model, device connection, input dispatch."""

from .codec import HexDecodeResult, decode_hex, encode_hex
from .device import ConnectionState, TwoWayMidiDevice
from .enumeration import MidiDeviceInfo, format_endpoint_count, list_devices, make_name_uid_safe
from .messages import (
    CONTROL_CHANGE,
    NOTE_OFF,
    NOTE_ON,
    PROGRAM_CHANGE,
    ShortMessage,
    SysexMessage,
    WireMessage,
    from_mido,
    parse_wire_message,
    to_mido,
)
from .receiver import MessageHandler, MidiInputReceiver

__all__ = [
    "CONTROL_CHANGE",
    "ConnectionState",
    "HexDecodeResult",
    "MessageHandler",
    "MidiDeviceInfo",
    "MidiInputReceiver",
    "NOTE_OFF",
    "NOTE_ON",
    "PROGRAM_CHANGE",
    "ShortMessage",
    "SysexMessage",
    "TwoWayMidiDevice",
    "WireMessage",
    "decode_hex",
    "encode_hex",
    "format_endpoint_count",
    "from_mido",
    "list_devices",
    "make_name_uid_safe",
    "parse_wire_message",
    "to_mido",
]
