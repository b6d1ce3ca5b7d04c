"""
Routing nodes: device → channel → control change.

A device node receives every decoded message from its MIDI device and
re-dispatches channel messages to the channel node registered for the
message's channel. A channel node does the same for control changes,
keyed by controller number. Missing children are normal: the message
simply isn't routed any further.

Nodes never create children. Discovery listeners attached to a node
report keys that have no child yet; the host decides whether to add one.

Routing runs on the MIDI input thread, so nothing here may block.
"""

import logging
import threading
from functools import partial
from typing import TYPE_CHECKING

from midilink.constants import (
    CHANNEL_CC_VALUE,
    CHANNEL_CONTROL_CHANGE,
    CHANNEL_NOTE_OFF,
    CHANNEL_NOTE_ON,
    CHANNEL_PROGRAM_CHANGE,
    CHANNEL_RECEIVE_CHANNEL_MESSAGE,
    CHANNEL_RECEIVE_SYSEX_MESSAGE,
    CHANNEL_SEND_CHANNEL_MESSAGE,
    CHANNEL_SEND_SYSEX_MESSAGE,
)
from midilink.exceptions import MidiDeviceError, MismatchedRoutingError
from midilink.midi import (
    CONTROL_CHANGE,
    NOTE_OFF,
    NOTE_ON,
    PROGRAM_CHANGE,
    MidiInputReceiver,
    ShortMessage,
    TwoWayMidiDevice,
)
from midilink.models import (
    ChannelConfig,
    CompatibilityConfig,
    ControlChangeConfig,
    DeviceConfig,
    NodeStatus,
)
from midilink.protocols import HostCallback, MidiEventListener, Scheduler
from midilink.utils import ListenerRegistry

if TYPE_CHECKING:
    from .tree import RoutingTree

logger = logging.getLogger(__name__)


class RoutingNode:
    """
    Base class for nodes in the routing tree.

    The parent is referenced by id and resolved through the tree; nodes
    never own their parent.
    """

    def __init__(
        self,
        node_id: str,
        key: int | None,
        tree: "RoutingTree",
        host: HostCallback,
        parent_id: str | None = None,
    ):
        self.node_id = node_id
        self.key = key
        self.parent_id = parent_id
        self._tree = tree
        self._host = host
        self._status = NodeStatus.UNKNOWN
        self._listeners = ListenerRegistry[MidiEventListener](
            listener_type_name=f"{type(self).__name__} event"
        )

    @property
    def status(self) -> NodeStatus:
        return self._status

    @property
    def parent(self) -> "RoutingNode | None":
        return self._tree.parent_of(self.node_id)

    @property
    def compatibility(self) -> CompatibilityConfig:
        return self._tree.compatibility

    def find_child(self, key: int) -> "RoutingNode | None":
        return self._tree.find_child(self.node_id, key)

    def has_child(self, key: int) -> bool:
        return self.find_child(key) is not None

    def initialize(self) -> None:
        self._update_status(NodeStatus.ONLINE)

    def dispose(self) -> None:
        pass

    def handle_command(self, channel_id: str, message_text: str) -> bool:
        logger.debug(f"{self.node_id} ignores command for {channel_id}")
        return False

    def received_short_message(self, message: ShortMessage, message_text: str) -> None:
        raise NotImplementedError

    # Event listening

    def add_event_listener(self, listener: MidiEventListener) -> None:
        self._listeners.register(listener)

    def remove_event_listener(self, listener: MidiEventListener) -> None:
        self._listeners.unregister(listener)

    def has_event_listener(self, listener: MidiEventListener) -> bool:
        return listener in self._listeners

    def trigger_event_listeners(self, message: ShortMessage, message_text: str) -> None:
        self._listeners.notify("received_message", message, message_text)

    # Host callbacks

    def _update_status(self, status: NodeStatus, detail: str | None = None) -> None:
        self._status = status
        self._host.status_updated(self.node_id, status, detail)

    def _update_state(self, channel_id: str, value: int) -> None:
        self._host.state_updated(self.node_id, channel_id, value)

    def _trigger_channel(self, channel_id: str, payload: str) -> None:
        self._host.channel_triggered(self.node_id, channel_id, payload)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.node_id!r})"


class DeviceNode(RoutingNode):
    """
    Root node: owns the connection to one MIDI device.

    Connecting blocks on platform I/O, so initialize() hands it to the
    host's scheduler and reports the outcome as a status change.
    """

    def __init__(
        self,
        node_id: str,
        config: DeviceConfig,
        tree: "RoutingTree",
        host: HostCallback,
        scheduler: Scheduler,
    ):
        super().__init__(node_id, None, tree, host)
        self.config = config
        self._scheduler = scheduler
        self._device: TwoWayMidiDevice | None = None
        self._device_lock = threading.Lock()
        # Bumped by every initialize() and dispose(); a connect attempt only
        # keeps its device if no newer call happened while it was connecting
        self._generation = 0

    @property
    def device(self) -> TwoWayMidiDevice | None:
        return self._device

    @property
    def device_id(self) -> str:
        """Name of the connected device, empty while not connected."""
        device = self._device
        if device is not None:
            return device.device_id
        return ""

    def initialize(self) -> None:
        """(Re)connect. An existing connection is closed first."""
        previous, generation = self._release_device()
        if previous is not None:
            previous.close()
        self._update_status(NodeStatus.UNKNOWN)
        self._scheduler(partial(self._connect, generation))

    def _connect(self, generation: int) -> None:
        device_id = self.config.device_id
        logger.debug(f"Connecting to MIDI device '{device_id}'")
        try:
            device = TwoWayMidiDevice.connect(
                device_id,
                MidiInputReceiver(device_id, self),
                invert_channel_length_check=self.compatibility.invert_channel_length_check,
            )
        except MidiDeviceError as e:
            logger.error(f"Failed to connect to MIDI device: {e.technical_message}")
            if generation == self._generation:
                self._update_status(NodeStatus.OFFLINE, e.user_message)
            return

        with self._device_lock:
            current = generation == self._generation
            if current:
                self._device = device

        if not current:
            # dispose() or another initialize() ran while we were connecting
            logger.debug(f"Dropping stale connection to MIDI device '{device_id}'")
            device.close()
            return

        self._update_status(NodeStatus.ONLINE)

    def dispose(self) -> None:
        device, _ = self._release_device()
        if device is not None:
            device.close()

    def _release_device(self) -> tuple[TwoWayMidiDevice | None, int]:
        """Detach the current device and invalidate pending connects."""
        with self._device_lock:
            self._generation += 1
            device, self._device = self._device, None
            return device, self._generation

    def handle_command(self, channel_id: str, message_text: str) -> bool:
        """
        Send a message typed into one of the device's send channels.

        Returns:
            True if the message was transmitted
        """
        device = self._device
        if device is None:
            logger.debug(f"Ignoring command for {channel_id}, {self.node_id} is not connected")
            return False

        if channel_id == CHANNEL_SEND_SYSEX_MESSAGE:
            return device.transmit_sysex(message_text)
        if channel_id == CHANNEL_SEND_CHANNEL_MESSAGE:
            return device.transmit_channel(message_text)
        return super().handle_command(channel_id, message_text)

    def received_sysex_message(self, message_text: str) -> None:
        self._trigger_channel(CHANNEL_RECEIVE_SYSEX_MESSAGE, message_text)

    def received_short_message(self, message: ShortMessage, message_text: str) -> None:
        self._trigger_channel(CHANNEL_RECEIVE_CHANNEL_MESSAGE, message_text)

        channel = self.find_child(message.channel + 1)
        if channel is not None:
            channel.received_short_message(message, message_text)

        # Background discovery
        self.trigger_event_listeners(message, message_text)


class ChannelNode(RoutingNode):
    """Node for one MIDI channel (1-16) of a device."""

    def __init__(
        self,
        node_id: str,
        config: ChannelConfig,
        tree: "RoutingTree",
        host: HostCallback,
        parent_id: str,
    ):
        super().__init__(node_id, config.channel, tree, host, parent_id)
        self.config = config

    @property
    def channel(self) -> int:
        return self.config.channel

    @property
    def device_node(self) -> DeviceNode | None:
        parent = self.parent
        return parent if isinstance(parent, DeviceNode) else None

    def initialize(self) -> None:
        logger.debug(f"Listening on MIDI channel {self.channel}")
        super().initialize()

    def received_short_message(self, message: ShortMessage, message_text: str) -> None:
        command = message.command
        logger.debug(f"Channel {self.channel} received command type {command} message {message_text}")

        if command == NOTE_ON:
            self._update_state(CHANNEL_NOTE_ON, message.data1)
        elif command == NOTE_OFF:
            self._update_state(CHANNEL_NOTE_OFF, message.data1)
        elif command == CONTROL_CHANGE:
            self._update_state(CHANNEL_CONTROL_CHANGE, message.data1)

            control = self.find_child(message.data1)
            if control is not None:
                control.received_short_message(message, message_text)
        elif command == PROGRAM_CHANGE:
            self._update_state(CHANNEL_PROGRAM_CHANGE, message.data1)
        else:
            logger.debug(f"Channel received update of unhandled command: {command}, message: {message_text}")

        self.trigger_event_listeners(message, message_text)


class ControlChangeNode(RoutingNode):
    """Node for one control change number (0-127) of a channel."""

    def __init__(
        self,
        node_id: str,
        config: ControlChangeConfig,
        tree: "RoutingTree",
        host: HostCallback,
        parent_id: str,
    ):
        super().__init__(node_id, config.cc_number, tree, host, parent_id)
        self.config = config

    @property
    def cc_number(self) -> int:
        return self.config.cc_number

    def initialize(self) -> None:
        logger.debug(f"Listening for MIDI control change message number {self.cc_number}")
        super().initialize()

    def received_short_message(self, message: ShortMessage, message_text: str) -> None:
        logger.debug(
            f"Control change number {message.data1} received value {message.data2}, message {message_text}"
        )

        if message.command != CONTROL_CHANGE:
            logger.error(f"Illegal command type for command change: {message.command}. Message: {message_text}")
            return

        if message.data1 != self.cc_number:
            error = MismatchedRoutingError(self.node_id, self.cc_number, message.data1, message_text)
            logger.error(error.user_message)
            return

        self._update_state(CHANNEL_CC_VALUE, message.data2)
