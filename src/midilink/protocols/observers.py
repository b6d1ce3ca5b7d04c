"""Listener protocols for routed MIDI traffic and discovery."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from midilink.midi import ShortMessage
    from midilink.models import DiscoveryResult


@runtime_checkable
class MidiEventListener(Protocol):
    """
    Listener attached to a device or channel node.

    Note:
        Called from the MIDI input thread, so implementations should be
        thread-safe and avoid blocking operations.
    """

    def received_message(self, message: "ShortMessage", message_text: str) -> None:
        """
        Handle a message that reached the node.

        Args:
            message: The decoded message
            message_text: The message formatted as hex text
        """
        ...


@runtime_checkable
class DiscoveryListener(Protocol):
    """Receives results from discovery services (the host's inbox)."""

    def thing_discovered(self, result: "DiscoveryResult") -> None:
        ...

    def thing_removed(self, thing_uid: str) -> None:
        ...
