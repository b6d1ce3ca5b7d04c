"""Tests for the wire message model."""

import mido
import pytest

from midilink.exceptions import MalformedMessageTextError
from midilink.midi import (
    CONTROL_CHANGE,
    NOTE_ON,
    PROGRAM_CHANGE,
    ShortMessage,
    SysexMessage,
    from_mido,
    parse_wire_message,
    to_mido,
)


@pytest.mark.unit
class TestShortMessage:
    """Test ShortMessage construction and accessors."""

    def test_command_and_channel(self):
        msg = ShortMessage(0x92, 0x3C, 0x40)
        assert msg.command == NOTE_ON
        assert msg.channel == 2
        assert msg.data1 == 0x3C
        assert msg.data2 == 0x40

    def test_from_parts(self):
        assert ShortMessage.from_parts(CONTROL_CHANGE, 15, 7, 100) == ShortMessage(0xBF, 7, 100)

    def test_from_parts_rejects_channel_out_of_range(self):
        with pytest.raises(MalformedMessageTextError):
            ShortMessage.from_parts(NOTE_ON, 16, 60, 64)

    def test_from_parts_rejects_non_command(self):
        with pytest.raises(MalformedMessageTextError):
            ShortMessage.from_parts(0x91, 0, 60, 64)

    def test_rejects_non_channel_status(self):
        with pytest.raises(MalformedMessageTextError):
            ShortMessage(0xF8)

    def test_rejects_data_out_of_range(self):
        with pytest.raises(MalformedMessageTextError) as exc_info:
            ShortMessage(0x90, 0x80, 0x40)
        assert "data1" in exc_info.value.reason

    def test_program_change_is_two_bytes(self):
        msg = ShortMessage.from_bytes(bytes([0xC1, 0x05]))
        assert msg.command == PROGRAM_CHANGE
        assert msg.length == 2
        assert msg.to_bytes() == bytes([0xC1, 0x05])

    def test_from_bytes_needs_three_for_note_on(self):
        with pytest.raises(MalformedMessageTextError):
            ShortMessage.from_bytes(bytes([0x90, 0x3C]))

    def test_to_bytes(self):
        assert ShortMessage(0xB0, 7, 100).to_bytes() == bytes([0xB0, 7, 100])


@pytest.mark.unit
class TestSysexMessage:
    """Test SysexMessage framing."""

    def test_data_strips_framing(self):
        msg = SysexMessage(bytes([0xF0, 0x7E, 0x00, 0xF7]))
        assert msg.data == bytes([0x7E, 0x00])
        assert msg.to_bytes() == bytes([0xF0, 0x7E, 0x00, 0xF7])

    @pytest.mark.parametrize(
        "payload",
        [bytes([0x7E, 0x00]), bytes([0xF0, 0x7E]), bytes([0xF0])],
    )
    def test_requires_framing(self, payload):
        with pytest.raises(MalformedMessageTextError):
            SysexMessage(payload)


@pytest.mark.unit
class TestParseWireMessage:
    """Test classification of inbound bytes."""

    def test_sysex(self):
        assert isinstance(parse_wire_message(bytes([0xF0, 0x7E, 0x00, 0xF7])), SysexMessage)

    def test_short(self):
        assert parse_wire_message(bytes([0x90, 0x3C, 0x40])) == ShortMessage(0x90, 0x3C, 0x40)

    @pytest.mark.parametrize(
        "data",
        [b"", bytes([0xF8]), bytes([0xFE]), bytes([0x90, 0x3C]), bytes([0xF0, 0x01])],
    )
    def test_unsupported_or_broken(self, data):
        assert parse_wire_message(data) is None


@pytest.mark.unit
class TestMidoConversion:
    """Test conversion to and from mido messages."""

    def test_to_mido_note_on(self):
        msg = to_mido(ShortMessage(0x90, 0x3C, 0x40))
        assert msg.type == "note_on"
        assert msg.note == 0x3C
        assert msg.velocity == 0x40
        assert msg.channel == 0

    def test_to_mido_sysex(self):
        msg = to_mido(SysexMessage(bytes([0xF0, 0x7E, 0x00, 0xF7])))
        assert msg.type == "sysex"
        assert list(msg.data) == [0x7E, 0x00]

    def test_from_mido_control_change(self):
        msg = mido.Message("control_change", channel=2, control=7, value=100)
        assert from_mido(msg) == ShortMessage(0xB2, 7, 100)

    def test_from_mido_clock_is_unsupported(self):
        assert from_mido(mido.Message("clock")) is None
