"""Discovery of MIDI devices through platform enumeration."""

import logging
import time

from midilink.constants import THING_TYPE_MIDI_DEVICE
from midilink.exceptions import ErrorContext, collect_errors
from midilink.midi import MidiDeviceInfo, format_endpoint_count, list_devices, make_name_uid_safe
from midilink.models import DiscoveryResult

from .base import DiscoveryService

logger = logging.getLogger(__name__)


class DeviceDiscoveryService(DiscoveryService):
    """
    Finds MIDI devices by asking the platform for its port list.

    Unlike channel and control change discovery this is poll driven: every
    scan enumerates the ports synchronously and reports each device with at
    least one endpoint we can send to or receive from. Devices that were
    not seen again by the time the scan stops are removed.
    """

    def __init__(self):
        super().__init__({THING_TYPE_MIDI_DEVICE}, background_discovery=False)
        self._scan_started: float | None = None

    def start_scan(self) -> bool:
        self._scan_started = time.time()

        devices: list[MidiDeviceInfo] = []
        with ErrorContext("enumerate MIDI devices", logger, re_raise=False):
            devices = list_devices()

        collector = collect_errors("scan MIDI devices")
        for info in devices:
            if not info.is_usable:
                logger.debug(f"Skipping MIDI device without endpoints: {info.name}")
                continue
            with collector.try_operation(f"report {info.name}"):
                self.thing_discovered(self._to_result(info))

        if collector.has_errors:
            logger.warning(collector.get_summary())
        return True

    def stop_scan(self) -> None:
        if self._scan_started is not None:
            self.remove_older_results(self._scan_started)
            self._scan_started = None

    @staticmethod
    def _to_result(info: MidiDeviceInfo) -> DiscoveryResult:
        return DiscoveryResult(
            thing_uid=make_name_uid_safe(info.name),
            thing_type=THING_TYPE_MIDI_DEVICE,
            label=info.name,
            properties={
                "deviceId": info.name,
                "vendor": info.vendor,
                "version": info.version,
                "description": info.description,
                "maxReceivers": format_endpoint_count(info.max_receivers),
                "maxTransmitters": format_endpoint_count(info.max_transmitters),
            },
            representation_property="deviceId",
        )
