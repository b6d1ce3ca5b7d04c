"""Platform MIDI device enumeration."""

import logging
import re

import mido
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

UNLIMITED = -1

_INVALID_UID_CHARS = re.compile(r"\W")


class MidiDeviceInfo(BaseModel):
    """One device as reported by the platform."""

    name: str = Field(description="Exact port name, used as the device id")
    vendor: str = Field(default="", description="MIDI backend that provides the port")
    version: str = Field(default="", description="Backend version")
    description: str = Field(default="", description="Human readable summary")
    max_receivers: int = Field(
        default=0, description="Endpoints we can send to (-1 = unlimited)"
    )
    max_transmitters: int = Field(
        default=0, description="Endpoints we can receive from (-1 = unlimited)"
    )

    @property
    def is_usable(self) -> bool:
        """True if we can send to or receive from the device."""
        return self.max_receivers != 0 or self.max_transmitters != 0


def format_endpoint_count(count: int) -> str:
    """Render an endpoint count, with -1 meaning unlimited."""
    if count == UNLIMITED:
        return "unlimited"
    return str(count)


def make_name_uid_safe(name: str) -> str:
    """Replace every non-word character so the name can be used in an id."""
    return _INVALID_UID_CHARS.sub("-", name)


def _backend_name() -> str:
    try:
        return mido.backend.name or "mido"
    except Exception as e:
        logger.debug(f"Could not determine MIDI backend: {e}")
        return "mido"


def list_devices() -> list[MidiDeviceInfo]:
    """
    Enumerate MIDI devices.

    mido lists input and output ports separately; ports with the same name
    are merged into one device. Input ports transmit to us, output ports
    receive from us.

    Returns:
        Devices in first-seen order
    """
    input_names = mido.get_input_names()
    output_names = mido.get_output_names()

    vendor = _backend_name()
    version = getattr(mido, "__version__", "")

    names = list(dict.fromkeys([*input_names, *output_names]))
    devices = []
    for name in names:
        transmitters = input_names.count(name)
        receivers = output_names.count(name)

        directions = []
        if transmitters:
            directions.append("input")
        if receivers:
            directions.append("output")

        devices.append(
            MidiDeviceInfo(
                name=name,
                vendor=vendor,
                version=version,
                description=f"MIDI {'/'.join(directions)} port",
                max_receivers=receivers,
                max_transmitters=transmitters,
            )
        )

    logger.debug(f"Found {len(devices)} MIDI device(s)")
    return devices
