"""Root of the midilink exception hierarchy."""

from typing import Optional


class MidiLinkError(Exception):
    """
    Base exception for midilink.

    Every error carries two renderings: ``user_message`` is what the CLI or
    a host status line shows, ``technical_message`` is what goes to the log.
    ``recoverable`` marks failures a later attempt may clear (an unplugged
    device can be back on the next connect) and ``recovery_hint`` says what
    the user can do about it.
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        *,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message
