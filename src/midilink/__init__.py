"""midilink: MIDI device driver and message routing."""

__version__ = "0.1.0"

from .midi import TwoWayMidiDevice
from .routing import RoutingTree

__all__ = [
    "RoutingTree",
    "TwoWayMidiDevice",
]
