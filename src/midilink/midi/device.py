"""Two-way connection to a single MIDI device."""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

import mido

from midilink.exceptions import (
    DeviceUnavailableError,
    MalformedMessageTextError,
    handle_errors,
    wrap_midi_device_error,
)

from .codec import decode_hex
from .messages import ShortMessage, SysexMessage, WireMessage, to_mido

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """Lifecycle of a TwoWayMidiDevice."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class TwoWayMidiDevice:
    """
    Owns the receive and transmit endpoints of one MIDI device.

    The receive endpoint is the mido input port (the device transmits to us),
    the transmit endpoint is the mido output port (we send to the device).
    Both are looked up by exact port name. At least one of them must open for
    the connection to be usable; both open means full duplex.

    There is no retry logic here: a failed connect leaves the instance
    DISCONNECTED and the caller decides when to try again.
    """

    def __init__(self, device_id: str, invert_channel_length_check: bool = False):
        """
        Args:
            device_id: Exact MIDI port name of the device
            invert_channel_length_check: Reproduce the legacy transmit_channel
                length guard (see transmit_channel)
        """
        self._device_id = device_id
        self._invert_channel_length_check = invert_channel_length_check
        self._receive_endpoint: Optional[mido.ports.BaseInput] = None
        self._transmit_endpoint: Optional[mido.ports.BaseOutput] = None
        self._state = ConnectionState.DISCONNECTED
        self._port_lock = threading.Lock()

    @classmethod
    def connect(
        cls,
        device_id: str,
        receive_callback: Callable[[mido.Message], None],
        *,
        invert_channel_length_check: bool = False,
    ) -> "TwoWayMidiDevice":
        """
        Open the named device.

        Blocks on platform I/O; hosts should call this off their main thread.

        Args:
            device_id: Exact MIDI port name
            receive_callback: Sink for inbound messages, run on mido's I/O thread
            invert_channel_length_check: See __init__

        Returns:
            Connected device

        Raises:
            DeviceUnavailableError: If no endpoint could be opened
        """
        device = cls(device_id, invert_channel_length_check=invert_channel_length_check)
        device.open(receive_callback)
        return device

    def open(self, receive_callback: Callable[[mido.Message], None]) -> None:
        """Open both endpoints of the device. See connect()."""
        with self._port_lock:
            if self._state == ConnectionState.CLOSED:
                raise DeviceUnavailableError(self._device_id, original_error="device has been closed")
            self._state = ConnectionState.CONNECTING

        receive_endpoint = None
        transmit_endpoint = None
        try:
            if self._device_id in mido.get_input_names():
                receive_endpoint = mido.open_input(self._device_id, callback=receive_callback)

            if self._device_id in mido.get_output_names():
                transmit_endpoint = mido.open_output(self._device_id)
        except Exception as e:
            for port in (receive_endpoint, transmit_endpoint):
                self._close_port(port)
            self._reset_after_failed_open()
            raise wrap_midi_device_error(e, self._device_id) from e

        if receive_endpoint is None and transmit_endpoint is None:
            self._reset_after_failed_open()
            raise DeviceUnavailableError(self._device_id, original_error="no MIDI port with that name")

        with self._port_lock:
            closed_while_opening = self._state == ConnectionState.CLOSED
            if not closed_while_opening:
                self._receive_endpoint = receive_endpoint
                self._transmit_endpoint = transmit_endpoint
                self._state = ConnectionState.CONNECTED

        if closed_while_opening:
            # close() ran while the ports were opening, nobody else owns them
            for port in (receive_endpoint, transmit_endpoint):
                self._close_port(port)
            raise DeviceUnavailableError(self._device_id, original_error="device was closed while opening")

        if receive_endpoint is None or transmit_endpoint is None:
            direction = "send only" if receive_endpoint is None else "receive only"
            logger.warning(f"MIDI device '{self._device_id}' opened {direction}")
        logger.info(f"Connected to MIDI device: {self._device_id}")

    def _reset_after_failed_open(self) -> None:
        with self._port_lock:
            if self._state != ConnectionState.CLOSED:
                self._state = ConnectionState.DISCONNECTED

    @property
    def device_id(self) -> str:
        return self._device_id

    @property
    def receive_endpoint(self) -> Optional[mido.ports.BaseInput]:
        return self._receive_endpoint

    @property
    def transmit_endpoint(self) -> Optional[mido.ports.BaseOutput]:
        return self._transmit_endpoint

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        """True while at least one endpoint is open."""
        with self._port_lock:
            return self._receive_endpoint is not None or self._transmit_endpoint is not None

    @property
    def is_duplex(self) -> bool:
        """True while both endpoints are open."""
        with self._port_lock:
            return self._receive_endpoint is not None and self._transmit_endpoint is not None

    def transmit_sysex(self, message_text: str) -> bool:
        """
        Send a system exclusive message given as hex text.

        Returns:
            True if the message was handed to the device
        """
        result = decode_hex(message_text)
        if not result.ok:
            logger.error(f"Failed to parse MIDI message '{message_text}': {result.error}")
            return False

        try:
            message = SysexMessage(result.data)
        except MalformedMessageTextError as e:
            logger.error(f"Invalid MIDI data: '{message_text}': {e.reason}")
            return False

        return self._transmit(message, message_text)

    def transmit_channel(self, message_text: str) -> bool:
        """
        Send a channel message given as hex text.

        Three bytes are sent as-is (status, data1, data2). Four bytes are read
        as command, channel, data1, data2.

        The default deliberately departs from the legacy driver, whose guard was
        inverted and rejected exactly the 3 and 4 byte messages it was meant to
        accept. invert_channel_length_check restores that guard: 3 and 4 byte
        input is refused, longer input is built from its first four bytes and
        shorter input still fails.

        Returns:
            True if the message was handed to the device
        """
        result = decode_hex(message_text)
        if not result.ok:
            logger.error(f"Failed to parse MIDI message '{message_text}': {result.error}")
            return False

        data = result.data
        in_range = 3 <= len(data) <= 4
        if in_range == self._invert_channel_length_check:
            logger.error(f"Failed to parse MIDI message '{message_text}', needs to be 3 or 4 bytes long")
            return False

        try:
            if len(data) == 3:
                message = ShortMessage(data[0], data[1], data[2])
            elif len(data) >= 4:
                message = ShortMessage.from_parts(data[0], data[1], data[2], data[3])
            else:
                raise MalformedMessageTextError(message_text, "needs to be 3 or 4 bytes long")
        except MalformedMessageTextError as e:
            logger.error(f"Invalid MIDI data: '{message_text}': {e.reason}")
            return False

        return self._transmit(message, message_text)

    def _transmit(self, message: WireMessage, message_text: str) -> bool:
        try:
            mido_message = to_mido(message)
        except ValueError as e:
            logger.error(f"Invalid MIDI data: '{message_text}': {e}")
            return False

        with self._port_lock:
            port = self._transmit_endpoint
            if port is None:
                logger.error(
                    f"MIDI device '{self._device_id}' has no receiver to send message {message_text} to"
                )
                return False
            try:
                port.send(mido_message)
            except Exception as e:
                logger.error(f"MIDI unavailable, failed to send message '{message_text}': {e}")
                return False

        logger.debug(f"Sent message {message_text} to {self._device_id}")
        return True

    def close(self) -> None:
        """Release both endpoints. Safe to call repeatedly."""
        with self._port_lock:
            receive_endpoint, self._receive_endpoint = self._receive_endpoint, None
            transmit_endpoint, self._transmit_endpoint = self._transmit_endpoint, None
            if self._state == ConnectionState.CLOSED:
                return
            self._state = ConnectionState.CLOSED

        self._close_port(receive_endpoint)
        self._close_port(transmit_endpoint)
        logger.debug(f"Closed MIDI device: {self._device_id}")

    @staticmethod
    @handle_errors(operation_name="close MIDI port", re_raise=False)
    def _close_port(port) -> None:
        if port is None or port.closed:
            return
        port.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
