"""CLI commands for midilink."""

from .config import config
from .devices import devices_group
from .monitor import monitor
from .send import send

__all__ = ["config", "devices_group", "monitor", "send"]
