"""Tests for the two-way MIDI device connection."""

import logging
from unittest.mock import Mock, patch

import mido
import pytest

from midilink.exceptions import DeviceUnavailableError
from midilink.midi import ConnectionState, TwoWayMidiDevice


@pytest.fixture
def device(test_synth):
    dev = TwoWayMidiDevice.connect("TestSynth", Mock())
    yield dev
    dev.close()


@pytest.mark.integration
class TestConnect:
    """Test opening devices."""

    def test_opens_both_endpoints(self, device, test_synth):
        assert device.is_open
        assert device.is_duplex
        assert device.state == ConnectionState.CONNECTED
        assert device.receive_endpoint is test_synth.inputs["TestSynth"]
        assert device.transmit_endpoint is test_synth.outputs["TestSynth"]

    def test_registers_receive_callback(self, test_synth):
        callback = Mock()
        with TwoWayMidiDevice.connect("TestSynth", callback):
            test_synth.receive("TestSynth", [0x90, 0x3C, 0x40])
        callback.assert_called_once()
        assert callback.call_args.args[0].bytes() == [0x90, 0x3C, 0x40]

    def test_unknown_device(self, midi_backend):
        with pytest.raises(DeviceUnavailableError) as exc_info:
            TwoWayMidiDevice.connect("Missing", Mock())
        assert exc_info.value.user_message == "Unable to open MIDI device 'Missing'"
        assert exc_info.value.recoverable

    def test_exact_name_match_only(self, midi_backend):
        midi_backend.add_device("TestSynth MIDI 1")
        with pytest.raises(DeviceUnavailableError):
            TwoWayMidiDevice.connect("TestSynth", Mock())

    def test_receive_only_device(self, midi_backend):
        midi_backend.add_device("Keys", output=False)
        with TwoWayMidiDevice.connect("Keys", Mock()) as dev:
            assert dev.is_open
            assert not dev.is_duplex
            assert dev.transmit_endpoint is None
            assert not dev.transmit_channel("90 3c 40")

    def test_backend_error_closes_opened_endpoint(self, test_synth):
        dev = TwoWayMidiDevice("TestSynth")
        with patch("mido.open_output", side_effect=OSError("port busy")):
            with pytest.raises(DeviceUnavailableError) as exc_info:
                dev.open(Mock())

        assert "port busy" in exc_info.value.technical_message
        assert test_synth.inputs["TestSynth"].closed
        assert dev.state == ConnectionState.DISCONNECTED
        assert not dev.is_open


@pytest.mark.integration
class TestTransmit:
    """Test sending messages typed as hex text."""

    def test_three_byte_channel_message(self, device, test_synth):
        assert device.transmit_channel("90 3C 40")
        assert test_synth.sent_bytes("TestSynth") == [[0x90, 0x3C, 0x40]]

    def test_four_byte_channel_message(self, device, test_synth):
        # command, channel, data1, data2
        assert device.transmit_channel("90 01 3C 40")
        assert test_synth.sent_bytes("TestSynth") == [[0x91, 0x3C, 0x40]]

    @pytest.mark.parametrize("text", ["90 3C", "90 3C 40 00 00", "zz", ""])
    def test_rejected_channel_messages(self, device, test_synth, text):
        assert not device.transmit_channel(text)
        test_synth.outputs["TestSynth"].send.assert_not_called()

    def test_rejects_data_out_of_range(self, device, test_synth):
        assert not device.transmit_channel("90 80 40")
        test_synth.outputs["TestSynth"].send.assert_not_called()

    def test_length_error_is_logged(self, device, caplog):
        with caplog.at_level(logging.ERROR):
            device.transmit_channel("90 3C")
        assert "needs to be 3 or 4 bytes long" in caplog.text

    def test_sysex(self, device, test_synth):
        assert device.transmit_sysex("F0 7E 00 F7")
        assert test_synth.sent_bytes("TestSynth") == [[0xF0, 0x7E, 0x00, 0xF7]]

    @pytest.mark.parametrize("text", ["7E 00", "F0 7E 00", "F0 zz F7"])
    def test_rejected_sysex(self, device, test_synth, text):
        assert not device.transmit_sysex(text)
        test_synth.outputs["TestSynth"].send.assert_not_called()

    def test_send_failure_returns_false(self, device, test_synth):
        test_synth.outputs["TestSynth"].send.side_effect = OSError("unplugged")
        assert not device.transmit_channel("90 3C 40")

    def test_after_close(self, device):
        device.close()
        assert not device.transmit_channel("90 3C 40")


@pytest.mark.integration
class TestLegacyLengthCheck:
    """Test the inverted channel message length guard."""

    @pytest.fixture
    def legacy_device(self, test_synth):
        dev = TwoWayMidiDevice.connect("TestSynth", Mock(), invert_channel_length_check=True)
        yield dev
        dev.close()

    def test_rejects_three_bytes(self, legacy_device, test_synth):
        assert not legacy_device.transmit_channel("90 3C 40")
        test_synth.outputs["TestSynth"].send.assert_not_called()

    def test_sends_first_four_of_longer_messages(self, legacy_device, test_synth):
        assert legacy_device.transmit_channel("90 01 3C 40 7F")
        assert test_synth.sent_bytes("TestSynth") == [[0x91, 0x3C, 0x40]]

    def test_short_messages_still_fail(self, legacy_device, test_synth):
        assert not legacy_device.transmit_channel("90 3C")
        test_synth.outputs["TestSynth"].send.assert_not_called()


@pytest.mark.integration
class TestClose:
    """Test releasing endpoints."""

    def test_close_twice(self, device, test_synth):
        device.close()
        device.close()

        assert test_synth.inputs["TestSynth"].close.call_count == 1
        assert test_synth.outputs["TestSynth"].close.call_count == 1
        assert device.state == ConnectionState.CLOSED
        assert not device.is_open

    def test_skips_already_closed_port(self, device, test_synth):
        test_synth.outputs["TestSynth"].closed = True
        device.close()
        test_synth.outputs["TestSynth"].close.assert_not_called()
        test_synth.inputs["TestSynth"].close.assert_called_once()

    def test_close_error_is_logged(self, device, test_synth, caplog):
        test_synth.inputs["TestSynth"].close.side_effect = OSError("gone")
        with caplog.at_level(logging.ERROR):
            device.close()
        assert "close MIDI port" in caplog.text
        test_synth.outputs["TestSynth"].close.assert_called_once()

    def test_close_while_opening_releases_new_ports(self, test_synth):
        dev = TwoWayMidiDevice("TestSynth")
        open_output = mido.open_output

        def close_then_open(name):
            dev.close()
            return open_output(name)

        with patch("mido.open_output", side_effect=close_then_open):
            with pytest.raises(DeviceUnavailableError) as exc_info:
                dev.open(Mock())

        assert "closed while opening" in exc_info.value.technical_message
        assert dev.state == ConnectionState.CLOSED
        assert not dev.is_open
        assert test_synth.inputs["TestSynth"].close.call_count == 1
        assert test_synth.outputs["TestSynth"].close.call_count == 1

    def test_reopen_after_close_fails(self, device):
        device.close()
        with pytest.raises(DeviceUnavailableError):
            device.open(Mock())

    def test_context_manager(self, test_synth):
        with TwoWayMidiDevice.connect("TestSynth", Mock()) as dev:
            assert dev.is_duplex
        assert dev.state == ConnectionState.CLOSED
