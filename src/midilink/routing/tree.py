"""Routing tree: owns every node and resolves parent/child links by id."""

import logging
import threading

from midilink.exceptions import DuplicateNodeError, RoutingTreeError
from midilink.midi import make_name_uid_safe
from midilink.models import ChannelConfig, CompatibilityConfig, ControlChangeConfig, DeviceConfig
from midilink.protocols import HostCallback, Scheduler

from .nodes import ChannelNode, ControlChangeNode, DeviceNode, RoutingNode

logger = logging.getLogger(__name__)


class RoutingTree:
    """
    Three-level tree of routing nodes: device → channel → control change.

    Mirrors the host's handler hierarchy. Children are added and removed
    only through this class, by the host; keys are unique per parent.

    Threading:
        Mutations come from host threads while lookups come from the MIDI
        input thread. All access to the index is guarded by one lock that is
        never held while node code runs.
    """

    def __init__(
        self,
        host: HostCallback,
        scheduler: Scheduler,
        compatibility: CompatibilityConfig | None = None,
    ):
        """
        Args:
            host: Receives status/state updates from every node
            scheduler: Runs device connects off the calling thread
            compatibility: Legacy behavior switches handed to device nodes
        """
        self._host = host
        self._scheduler = scheduler
        self._compatibility = compatibility or CompatibilityConfig()
        self._nodes: dict[str, RoutingNode] = {}
        self._children: dict[str, dict[int, str]] = {}
        self._lock = threading.Lock()

    @property
    def compatibility(self) -> CompatibilityConfig:
        return self._compatibility

    def add_device(self, config: DeviceConfig) -> DeviceNode:
        """Add a root node for a MIDI device."""
        node_id = make_name_uid_safe(config.device_id)
        node = DeviceNode(node_id, config, self, self._host, self._scheduler)
        with self._lock:
            if node_id in self._nodes:
                raise RoutingTreeError(f"Device node '{node_id}' already exists")
            self._nodes[node_id] = node
            self._children[node_id] = {}
        logger.debug(f"Added device node {node_id}")
        return node

    def add_channel(self, parent_id: str, config: ChannelConfig) -> ChannelNode:
        """Add a channel node under a device node."""
        node_id = f"{parent_id}:channel-{config.channel}"
        node = ChannelNode(node_id, config, self, self._host, parent_id)
        self._attach(parent_id, DeviceNode, node)
        return node

    def add_control_change(self, parent_id: str, config: ControlChangeConfig) -> ControlChangeNode:
        """Add a control change node under a channel node."""
        node_id = f"{parent_id}:cc-{config.cc_number}"
        node = ControlChangeNode(node_id, config, self, self._host, parent_id)
        self._attach(parent_id, ChannelNode, node)
        return node

    def _attach(self, parent_id: str, parent_type: type[RoutingNode], node: RoutingNode) -> None:
        with self._lock:
            parent = self._nodes.get(parent_id)
            if parent is None:
                raise RoutingTreeError(f"Unknown parent node '{parent_id}'")
            if not isinstance(parent, parent_type):
                raise RoutingTreeError(
                    f"{type(node).__name__} can't be added under {type(parent).__name__} '{parent_id}'"
                )
            siblings = self._children[parent_id]
            if node.key in siblings:
                raise DuplicateNodeError(parent_id, node.key)
            siblings[node.key] = node.node_id
            self._nodes[node.node_id] = node
            self._children[node.node_id] = {}
        logger.debug(f"Added {type(node).__name__} {node.node_id}")

    def remove(self, node_id: str) -> None:
        """Remove a node and its whole subtree, disposing every removed node."""
        with self._lock:
            node = self._nodes.get(node_id)
            if node is None:
                return
            removed = []
            pending = [node_id]
            while pending:
                current = pending.pop()
                removed.append(self._nodes.pop(current))
                pending.extend(self._children.pop(current, {}).values())
            if node.parent_id is not None and node.parent_id in self._children:
                self._children[node.parent_id].pop(node.key, None)

        for removed_node in removed:
            removed_node.dispose()
        logger.debug(f"Removed {len(removed)} node(s) starting at {node_id}")

    def get(self, node_id: str) -> RoutingNode | None:
        with self._lock:
            return self._nodes.get(node_id)

    def find_child(self, parent_id: str, key: int) -> RoutingNode | None:
        """Child of ``parent_id`` registered under ``key``, if any."""
        with self._lock:
            child_id = self._children.get(parent_id, {}).get(key)
            return self._nodes.get(child_id) if child_id is not None else None

    def has_child(self, parent_id: str, key: int) -> bool:
        return self.find_child(parent_id, key) is not None

    def children_of(self, node_id: str) -> list[RoutingNode]:
        with self._lock:
            return [self._nodes[child_id] for _, child_id in sorted(self._children.get(node_id, {}).items())]

    def parent_of(self, node_id: str) -> RoutingNode | None:
        with self._lock:
            node = self._nodes.get(node_id)
            if node is None or node.parent_id is None:
                return None
            return self._nodes.get(node.parent_id)

    def devices(self) -> list[DeviceNode]:
        with self._lock:
            return [node for node in self._nodes.values() if isinstance(node, DeviceNode)]

    def dispose(self) -> None:
        """Dispose and drop every node."""
        for device in self.devices():
            self.remove(device.node_id)

    def __contains__(self, node_id: str) -> bool:
        with self._lock:
            return node_id in self._nodes

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)
