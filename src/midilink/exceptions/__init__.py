"""
Exceptions raised by midilink.

```
MidiLinkError
├── MidiDeviceError
│   └── DeviceUnavailableError      no endpoint of the named device could be opened
├── MidiMessageError
│   ├── MalformedMessageTextError   hex text or byte count is not a valid message
│   └── MismatchedRoutingError      a control change reached the wrong node
├── RoutingTreeError
│   └── DuplicateNodeError          a sibling already uses the same channel or CC number
└── ConfigurationError
    ├── ConfigFileInvalidError      config file is empty or not JSON
    └── ConfigValidationError       a config value is out of range
```

Messages that have no routing node are not errors; they simply stop at the
deepest node that exists. ``handlers`` holds the helpers that convert
backend exceptions into these types and log failures that must not
propagate.
"""

from .base import MidiLinkError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import DeviceUnavailableError, MidiDeviceError
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    handle_errors,
    wrap_midi_device_error,
    wrap_pydantic_error,
)
from .message import (
    DuplicateNodeError,
    MalformedMessageTextError,
    MidiMessageError,
    MismatchedRoutingError,
    RoutingTreeError,
)

__all__ = [
    # Base
    "MidiLinkError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Device
    "DeviceUnavailableError",
    "MidiDeviceError",
    # Message / routing
    "DuplicateNodeError",
    "MalformedMessageTextError",
    "MidiMessageError",
    "MismatchedRoutingError",
    "RoutingTreeError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "collect_errors",
    "format_error_for_display",
    "handle_errors",
    "wrap_midi_device_error",
    "wrap_pydantic_error",
]
