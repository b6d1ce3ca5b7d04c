"""Console host: prints what the routing tree reports."""

import threading
from collections.abc import Callable
from datetime import datetime

import click

from midilink.models import DiscoveryResult, NodeStatus


def thread_scheduler(task: Callable[[], None]) -> threading.Thread:
    """Run a task on a daemon thread."""
    thread = threading.Thread(target=task, daemon=True)
    thread.start()
    return thread


def immediate_scheduler(task: Callable[[], None]) -> None:
    """Run a task on the calling thread."""
    task()


class ConsoleHost:
    """
    HostCallback and DiscoveryListener that echoes everything to stdout.

    Status changes can be waited for, so commands can block until a device
    node has finished connecting.
    """

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self._status_changed = threading.Condition()
        self._statuses: dict[str, NodeStatus] = {}

    def _echo(self, text: str) -> None:
        if not self.quiet:
            timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
            click.echo(f"[{timestamp}] {text}")

    def status_updated(self, node_id: str, status: NodeStatus, detail: str | None = None) -> None:
        with self._status_changed:
            self._statuses[node_id] = status
            self._status_changed.notify_all()
        suffix = f" ({detail})" if detail else ""
        self._echo(f"{node_id}: {status.value}{suffix}")

    def state_updated(self, node_id: str, channel_id: str, value: int) -> None:
        self._echo(f"{node_id} {channel_id} = {value}")

    def channel_triggered(self, node_id: str, channel_id: str, payload: str) -> None:
        self._echo(f"{node_id} {channel_id}: {payload}")

    def thing_discovered(self, result: DiscoveryResult) -> None:
        self._echo(f"Discovered {result.label} ({result.thing_uid})")

    def thing_removed(self, thing_uid: str) -> None:
        self._echo(f"Removed {thing_uid}")

    def wait_for_status(self, node_id: str, timeout: float | None = None) -> NodeStatus:
        """
        Block until the node reports ONLINE or OFFLINE.

        Returns:
            The last reported status (UNKNOWN on timeout)
        """
        settled = (NodeStatus.ONLINE, NodeStatus.OFFLINE)
        with self._status_changed:
            self._status_changed.wait_for(
                lambda: self._statuses.get(node_id) in settled, timeout=timeout
            )
            return self._statuses.get(node_id, NodeStatus.UNKNOWN)
