"""Thread-safe listener registry.

Each routing node owns one registry for its discovery listeners. Listeners
are added and removed from host threads while the MIDI input thread is
notifying them, so notification works on a snapshot taken under the lock.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=object)


class ListenerRegistry(Generic[T]):
    """
    Set of listeners with thread-safe registration and notification.

    Type Parameters:
        T: The listener protocol type (e.g., MidiEventListener)

    Thread Safety:
        All operations are thread-safe. The lock is released before calling
        listener callbacks, so a listener may (un)register from its callback.

    Example:
        ```python
        listeners = ListenerRegistry[MidiEventListener](listener_type_name="midi event")
        listeners.register(listener)
        listeners.notify("received_message", message, "90 3c 40")
        ```
    """

    def __init__(self, lock: Lock | None = None, listener_type_name: str = "listener"):
        """
        Args:
            lock: Optional threading lock to use. If None, creates a new lock.
            listener_type_name: Name of the listener type for logging
        """
        self._listeners: list[T] = []
        self._lock = lock or Lock()
        self._listener_type_name = listener_type_name

    def register(self, listener: T) -> None:
        """Register a listener (idempotent - won't add duplicates)."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)
                logger.debug(f"Registered {self._listener_type_name} listener: {listener}")
            else:
                logger.debug(f"{self._listener_type_name} listener already registered: {listener}")

    def unregister(self, listener: T) -> None:
        """Unregister a listener. Unknown listeners are ignored with a warning."""
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
                logger.debug(f"Unregistered {self._listener_type_name} listener: {listener}")
            else:
                logger.warning(
                    f"Attempted to unregister unknown {self._listener_type_name} listener: {listener}"
                )

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """
        Call ``callback_name`` on every listener.

        Exceptions in one listener are logged and don't affect the others.
        """
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                callback = getattr(listener, callback_name)
                callback(*args, **kwargs)
            except AttributeError:
                logger.error(
                    f"{self._listener_type_name} listener {listener} has no method '{callback_name}'",
                    exc_info=True,
                )
            except Exception as e:
                logger.error(
                    f"Error notifying {self._listener_type_name} listener {listener} via {callback_name}: {e}",
                    exc_info=True,
                )

    def clear(self) -> None:
        """Remove all registered listeners."""
        with self._lock:
            count = len(self._listeners)
            self._listeners.clear()
            if count > 0:
                logger.debug(f"Cleared {count} {self._listener_type_name} listener(s)")

    def __contains__(self, listener: T) -> bool:
        with self._lock:
            return listener in self._listeners

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def __bool__(self) -> bool:
        with self._lock:
            return len(self._listeners) > 0
