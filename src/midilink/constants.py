"""Identifiers shared between the driver and the host framework."""

BINDING_ID = "midi"

# Discovery
SEARCH_TIME = 15  # seconds
BACKGROUND_DISCOVERY = True

# Thing types
THING_TYPE_MIDI_DEVICE = f"{BINDING_ID}:device"
THING_TYPE_MIDI_CHANNEL = f"{BINDING_ID}:channel"
THING_TYPE_MIDI_CONTROL_CHANGE = f"{BINDING_ID}:control-change"

# Device channels
CHANNEL_SEND_SYSEX_MESSAGE = "sendSysexMessage"
CHANNEL_SEND_CHANNEL_MESSAGE = "sendChannelMessage"
CHANNEL_RECEIVE_SYSEX_MESSAGE = "receiveSysexMessage"
CHANNEL_RECEIVE_CHANNEL_MESSAGE = "receiveChannelMessage"

# MIDI channel channels
CHANNEL_NOTE_ON = "noteOn"
CHANNEL_NOTE_OFF = "noteOff"
CHANNEL_CONTROL_CHANGE = "controlChange"
CHANNEL_PROGRAM_CHANGE = "programChange"

# Control change channels
CHANNEL_CC_VALUE = "value"
