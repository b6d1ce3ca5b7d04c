"""Pytest fixtures for tests."""

from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock, patch

import mido
import pytest

from midilink.models import CompatibilityConfig
from midilink.routing import RoutingTree


class FakeMidiBackend:
    """
    Stands in for the platform MIDI layer behind mido.

    Devices are registered by name with an input and/or output port. Opened
    ports are MagicMocks whose close() flips ``closed`` like a real port.
    """

    def __init__(self):
        self.input_names: list[str] = []
        self.output_names: list[str] = []
        self.inputs: dict[str, MagicMock] = {}
        self.outputs: dict[str, MagicMock] = {}
        self.callbacks: dict[str, object] = {}

    def add_device(self, name: str, input: bool = True, output: bool = True) -> None:
        if input:
            self.input_names.append(name)
        if output:
            self.output_names.append(name)

    def get_input_names(self) -> list[str]:
        return list(self.input_names)

    def get_output_names(self) -> list[str]:
        return list(self.output_names)

    def _make_port(self, kind: str, name: str) -> MagicMock:
        port = MagicMock(name=f"{kind}:{name}")
        port.name = name
        port.closed = False

        def close():
            port.closed = True

        port.close.side_effect = close
        return port

    def open_input(self, name: str, callback=None) -> MagicMock:
        port = self._make_port("input", name)
        self.inputs[name] = port
        self.callbacks[name] = callback
        return port

    def open_output(self, name: str) -> MagicMock:
        port = self._make_port("output", name)
        self.outputs[name] = port
        return port

    def receive(self, name: str, data: list[int]) -> None:
        """Deliver raw bytes from a device as mido would, on the caller's thread."""
        self.callbacks[name](mido.Message.from_bytes(data))

    def sent_bytes(self, name: str) -> list[list[int]]:
        """Bytes of every message sent to a device's output port."""
        return [call.args[0].bytes() for call in self.outputs[name].send.call_args_list]


class RecordingHost:
    """HostCallback that records every call."""

    def __init__(self):
        self.statuses: list[tuple] = []
        self.states: list[tuple] = []
        self.triggers: list[tuple] = []

    def status_updated(self, node_id, status, detail=None):
        self.statuses.append((node_id, status, detail))

    def state_updated(self, node_id, channel_id, value):
        self.states.append((node_id, channel_id, value))

    def channel_triggered(self, node_id, channel_id, payload):
        self.triggers.append((node_id, channel_id, payload))


class RecordingDiscoveryListener:
    """DiscoveryListener that records every call."""

    def __init__(self):
        self.discovered = []
        self.removed = []

    def thing_discovered(self, result):
        self.discovered.append(result)

    def thing_removed(self, thing_uid):
        self.removed.append(thing_uid)


class DeferredScheduler:
    """Scheduler that holds tasks until run_all() is called."""

    def __init__(self):
        self.tasks = []

    def __call__(self, task):
        self.tasks.append(task)

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for task in tasks:
            task()


def immediate(task):
    task()


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def midi_backend():
    """Patch mido's port functions with a fake backend."""
    backend = FakeMidiBackend()
    with patch.multiple(
        mido,
        get_input_names=backend.get_input_names,
        get_output_names=backend.get_output_names,
        open_input=backend.open_input,
        open_output=backend.open_output,
    ):
        yield backend


@pytest.fixture
def test_synth(midi_backend):
    """Backend with one full duplex device named TestSynth."""
    midi_backend.add_device("TestSynth")
    return midi_backend


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def discovery_listener():
    return RecordingDiscoveryListener()


@pytest.fixture
def deferred_scheduler():
    return DeferredScheduler()


@pytest.fixture
def tree(host):
    """Routing tree that connects devices on the calling thread."""
    t = RoutingTree(host, immediate)
    yield t
    t.dispose()


@pytest.fixture
def legacy_tree(host):
    """Routing tree with every legacy compatibility switch on."""
    compatibility = CompatibilityConfig(
        invert_channel_length_check=True,
        stop_discovery_re_adds_listener=True,
    )
    t = RoutingTree(host, immediate, compatibility)
    yield t
    t.dispose()


@pytest.fixture
def discovery_listener_factory():
    """Callable that makes additional recording discovery listeners."""
    return RecordingDiscoveryListener
