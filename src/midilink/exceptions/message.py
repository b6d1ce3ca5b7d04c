"""MIDI message and routing exceptions.

This module defines exceptions for message and routing errors:
- MidiMessageError: Base class for message errors
- MalformedMessageTextError: Hex text or byte layout is not a valid message
- MismatchedRoutingError: A message reached a node with a different key
- RoutingTreeError: Base class for routing tree structure errors
- DuplicateNodeError: A child with the same key already exists
"""

from .base import MidiLinkError


class MidiMessageError(MidiLinkError):
    """A MIDI message could not be built, parsed, or delivered."""
    pass


class MalformedMessageTextError(MidiMessageError):
    """Message text failed to decode or has the wrong shape for its kind."""

    def __init__(self, message_text: str, reason: str):
        """
        Initialize malformed message error.

        Args:
            message_text: The text (or formatted bytes) that was rejected
            reason: Why it was rejected
        """
        super().__init__(
            user_message=f"Invalid MIDI message '{message_text}': {reason}",
            recoverable=True,
            recovery_hint="Messages are whitespace separated hex bytes, e.g. '90 3c 40'",
        )
        self.message_text = message_text
        self.reason = reason


class MismatchedRoutingError(MidiMessageError):
    """A message was dispatched to a node whose key does not match it."""

    def __init__(self, node_id: str, expected: int, actual: int, message_text: str):
        """
        Initialize mismatched routing error.

        Args:
            node_id: Node that received the message
            expected: Key the node is registered under
            actual: Key derived from the message
            message_text: Formatted message bytes
        """
        super().__init__(
            user_message=(
                f"Control change with number {actual} sent to handler for number "
                f"{expected} in message {message_text}"
            ),
            technical_message=f"Routing mismatch at {node_id}: expected {expected}, got {actual}",
        )
        self.node_id = node_id
        self.expected = expected
        self.actual = actual


class RoutingTreeError(MidiLinkError):
    """The routing tree was asked to do something structurally invalid."""
    pass


class DuplicateNodeError(RoutingTreeError):
    """A child node with the same key is already registered under the parent."""

    def __init__(self, parent_id: str, key: int):
        super().__init__(
            user_message=f"Node '{parent_id}' already has a child with key {key}",
            recoverable=True,
        )
        self.parent_id = parent_id
        self.key = key
