"""Common plumbing for discovery services."""

import logging
import time
from threading import Lock
from typing import TYPE_CHECKING

from midilink.constants import BACKGROUND_DISCOVERY, SEARCH_TIME
from midilink.models import DiscoveryResult
from midilink.protocols import DiscoveryListener
from midilink.utils import ListenerRegistry

if TYPE_CHECKING:
    from midilink.midi import ShortMessage
    from midilink.routing import RoutingNode

logger = logging.getLogger(__name__)


class DiscoveryService:
    """
    Base class for discovery services.

    Keeps the current results keyed by thing uid and forwards every new or
    removed result to the registered discovery listeners (the host inbox).

    Threading:
        Background services are fed from the MIDI input thread while the
        host reads results and starts/stops scans from its own threads.
        Results are guarded by _lock, which is released before listeners
        are notified.
    """

    def __init__(
        self,
        supported_thing_types: set[str],
        timeout: int = SEARCH_TIME,
        background_discovery: bool = BACKGROUND_DISCOVERY,
    ):
        """
        Args:
            supported_thing_types: Thing types this service can report
            timeout: Suggested scan duration in seconds
            background_discovery: Whether background discovery should run
                while the service is active
        """
        self.supported_thing_types = frozenset(supported_thing_types)
        self.timeout = timeout
        self.background_discovery = background_discovery
        self._results: dict[str, DiscoveryResult] = {}
        self._lock = Lock()
        self._listeners = ListenerRegistry[DiscoveryListener](listener_type_name="discovery")

    # Listeners

    def add_discovery_listener(self, listener: DiscoveryListener) -> None:
        self._listeners.register(listener)

    def remove_discovery_listener(self, listener: DiscoveryListener) -> None:
        self._listeners.unregister(listener)

    # Results

    @property
    def results(self) -> list[DiscoveryResult]:
        with self._lock:
            return list(self._results.values())

    def thing_discovered(self, result: DiscoveryResult) -> None:
        """Record a result and hand it to the listeners."""
        with self._lock:
            self._results[result.thing_uid] = result
        logger.debug(f"Discovered {result.thing_type} {result.thing_uid}: {result.label}")
        self._listeners.notify("thing_discovered", result)

    def thing_removed(self, thing_uid: str) -> None:
        with self._lock:
            removed = self._results.pop(thing_uid, None)
        if removed is not None:
            logger.debug(f"Removed discovery result {thing_uid}")
            self._listeners.notify("thing_removed", thing_uid)

    def remove_older_results(self, timestamp: float) -> list[str]:
        """
        Drop results reported before ``timestamp``.

        Returns:
            Uids of the removed results
        """
        with self._lock:
            stale = [uid for uid, result in self._results.items() if result.timestamp < timestamp]
        for uid in stale:
            self.thing_removed(uid)
        return stale

    # Scanning

    def start_scan(self) -> bool:
        """
        Run an on-demand scan.

        Returns:
            False if the service can't scan on demand
        """
        return False

    def stop_scan(self) -> None:
        pass

    def start_background_discovery(self) -> None:
        pass

    def stop_background_discovery(self) -> None:
        pass

    def activate(self) -> None:
        """Start background discovery if enabled."""
        if self.background_discovery:
            self.start_background_discovery()

    def deactivate(self) -> None:
        """Stop background discovery and forget all results."""
        if self.background_discovery:
            self.stop_background_discovery()
        self.remove_older_results(time.time() + 1)


class PassiveDiscoveryService(DiscoveryService):
    """
    Discovery driven by traffic on one routing node.

    The service registers itself as an event listener on the node and
    reports keys that have no child node yet. There is nothing to poll:
    children only show up when the device sends on them.
    """

    #: What the service finds, for log messages
    discovers = "things"

    def __init__(self, node: "RoutingNode", thing_type: str):
        super().__init__({thing_type})
        self.node = node

    def start_scan(self) -> bool:
        logger.info(
            f"Not able to scan on demand. Send MIDI messages to the device and {self.discovers} will be discovered."
        )
        return False

    def start_background_discovery(self) -> None:
        self.node.add_event_listener(self)

    def stop_background_discovery(self) -> None:
        if self.node.compatibility.stop_discovery_re_adds_listener:
            # Legacy behavior: the listener stays attached
            self.node.add_event_listener(self)
            return
        self.node.remove_event_listener(self)

    def received_message(self, message: "ShortMessage", message_text: str) -> None:
        raise NotImplementedError
