"""Generic utility modules for midilink.

- persistence: Pydantic model JSON load/save
- observer: Thread-safe listener registry
"""

from .observer import ListenerRegistry
from .persistence import PydanticPersistence

__all__ = ["ListenerRegistry", "PydanticPersistence"]
