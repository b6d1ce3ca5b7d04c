"""
Error handling helpers shared by the driver, discovery and CLI layers.

mido, rtmidi and pydantic raise plain Python exceptions. The ``wrap_*``
functions turn those into MidiLinkError subclasses with a user message and
a recovery hint, so the CLI and host status lines never show a raw
traceback.

Where a failure must not propagate (closing one port of two, enumerating
ports during a scan, reporting one device out of many) it is logged and
dropped through ``handle_errors``, ``ErrorContext`` or ``collect_errors``.
"""

import logging
from contextlib import contextmanager
from functools import wraps
from typing import Callable, Iterator, Optional

from pydantic import ValidationError

from .base import MidiLinkError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import DeviceUnavailableError, MidiDeviceError

logger = logging.getLogger(__name__)


def _log_failure(log: logging.Logger, operation: str, error: BaseException) -> None:
    # Our own errors already say what went wrong, anything else gets a traceback
    if isinstance(error, MidiLinkError):
        log.error(f"Failed to {operation}: {error.technical_message}")
    else:
        log.error(f"Failed to {operation}: {type(error).__name__}: {error}", exc_info=error)


def handle_errors(*, operation_name: str, re_raise: bool = True) -> Callable:
    """
    Decorator that logs any exception leaving the wrapped function.

    Args:
        operation_name: Used in the log line, e.g. "close MIDI port"
        re_raise: If False the exception is dropped after logging and the
            call returns None

    Example:
        ```python
        @handle_errors(operation_name="close MIDI port", re_raise=False)
        def _close_port(port):
            port.close()
        ```
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log_failure(logger, operation_name, e)
                if re_raise:
                    raise
                return None
        return wrapper
    return decorator


class ErrorContext:
    """
    Context manager that logs a failing block under an operation name.

    The exception is kept on ``error``. With ``re_raise=False`` it is
    suppressed and execution continues after the ``with`` block.
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
    ):
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not isinstance(exc_val, Exception):
            # Nothing raised, or KeyboardInterrupt / SystemExit which always propagate
            return False

        self.error = exc_val
        _log_failure(self.logger, self.operation, exc_val)
        return not self.re_raise


class ErrorCollector:
    """Runs a batch of independent steps, recording failures instead of stopping."""

    def __init__(self, operation: str):
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @contextmanager
    def try_operation(self, step: str) -> Iterator[None]:
        try:
            yield
        except Exception as e:
            _log_failure(logger, f"{step} ({self.operation})", e)
            self.errors.append((step, e))

    def get_summary(self) -> str:
        lines = [f"{self.operation}: {len(self.errors)} step(s) failed"]
        lines.extend(f"  - {step}: {error}" for step, error in self.errors)
        return "\n".join(lines)


def collect_errors(operation: str) -> ErrorCollector:
    """
    Start collecting errors for a batch operation.

    Example:
        ```python
        collector = collect_errors("scan MIDI devices")
        for info in devices:
            with collector.try_operation(f"report {info.name}"):
                publish(info)
        if collector.has_errors:
            logger.warning(collector.get_summary())
        ```
    """
    return ErrorCollector(operation)


def wrap_pydantic_error(error: ValidationError, file_path: str) -> ConfigurationError:
    """
    Convert a ValidationError raised while parsing a config file.

    Broken JSON becomes ConfigFileInvalidError. A bad value becomes
    ConfigValidationError naming the first offending field; when several
    fields are wrong the others are counted in the message.
    """
    details = error.errors()
    if not details:
        return ConfigFileInvalidError(file_path, str(error))

    first = details[0]
    if first.get("type") == "json_invalid":
        parse_error = first.get("ctx", {}).get("error", first.get("msg", str(error)))
        return ConfigFileInvalidError(file_path, str(parse_error))

    field = ".".join(str(part) for part in first.get("loc", ())) or "unknown"
    message = first.get("msg", "validation failed")
    if len(details) > 1:
        message += f" (and {len(details) - 1} more invalid value(s))"
    return ConfigValidationError(field, first.get("input"), message, file_path=file_path)


def wrap_midi_device_error(error: Exception, device_id: str) -> MidiDeviceError:
    """
    Convert an exception from mido or its backend into a MidiDeviceError.

    rtmidi reports busy or vanished ports as OSError, mido reports unknown
    names as IOError and a missing backend as ImportError. All of these mean
    the endpoint cannot be opened right now.
    """
    if isinstance(error, MidiDeviceError):
        return error

    if isinstance(error, (OSError, ImportError, ValueError)):
        return DeviceUnavailableError(device_id, original_error=str(error))

    return MidiDeviceError(
        user_message=f"MIDI device error: {error}",
        technical_message=f"MIDI device '{device_id}' error: {type(error).__name__}: {error}",
        device_id=device_id,
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """Return (message, recovery hint or None) for showing an error to a user."""
    if isinstance(error, MidiLinkError):
        return error.user_message, error.recovery_hint
    return f"{type(error).__name__}: {error}", None
