"""Input dispatcher for inbound MIDI frames."""

import logging
from typing import Protocol

import mido

from .codec import encode_hex
from .messages import ShortMessage, SysexMessage, parse_wire_message

logger = logging.getLogger(__name__)


class MessageHandler(Protocol):
    """Receives typed messages from a MidiInputReceiver."""

    def received_short_message(self, message: ShortMessage, message_text: str) -> None:
        ...

    def received_sysex_message(self, message_text: str) -> None:
        ...


class MidiInputReceiver:
    """
    Callback registered on a device's mido input port.

    Called from mido's (or the backend's) own I/O thread, which we neither
    own nor control - keep it fast and never let exceptions escape into it.
    """

    def __init__(self, device_name: str, handler: MessageHandler):
        """
        Args:
            device_name: Device name, used in log messages
            handler: Target for decoded messages
        """
        self.device_name = device_name
        self.handler = handler

    def __call__(self, msg: mido.Message | None) -> None:
        self.send(msg)

    def send(self, msg: mido.Message | None) -> None:
        """Decode one inbound frame and forward it to the handler."""
        if msg is None:
            return

        data = bytes(msg.bytes())
        if not data:
            return

        formatted = encode_hex(data)
        logger.debug(f"{self.device_name} received: {formatted}")

        try:
            match parse_wire_message(data):
                case ShortMessage() as short_message:
                    self.handler.received_short_message(short_message, formatted)
                case SysexMessage():
                    self.handler.received_sysex_message(formatted)
                case None:
                    logger.debug(
                        f"{self.device_name} received but ignored: {formatted}, type of message: {msg.type}"
                    )
        except Exception as e:
            logger.error(f"Error handling MIDI message {formatted} from {self.device_name}: {e}", exc_info=True)
