"""Hooks the host automation framework provides to the driver."""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from midilink.models import NodeStatus

# The host's background execution facility; Executor.submit satisfies it
Scheduler = Callable[[Callable[[], None]], object]


@runtime_checkable
class HostCallback(Protocol):
    """
    Receives status and state changes from routing nodes.

    Methods are called from the host's scheduler thread (status) and from
    the MIDI input thread (state and triggers); implementations must be
    thread-safe and must not block.
    """

    def status_updated(self, node_id: str, status: NodeStatus, detail: str | None = None) -> None:
        """Node went online/offline; detail explains an offline status."""
        ...

    def state_updated(self, node_id: str, channel_id: str, value: int) -> None:
        """A state channel of the node has a new value."""
        ...

    def channel_triggered(self, node_id: str, channel_id: str, payload: str) -> None:
        """A trigger channel of the node fired."""
        ...
