"""Discovery result model."""

import time

from pydantic import BaseModel, ConfigDict, Field


class DiscoveryResult(BaseModel):
    """A thing found by a discovery service, ready for the host inbox."""

    model_config = ConfigDict(frozen=True)

    thing_uid: str = Field(description="Identifier the thing would be created with")
    thing_type: str
    label: str
    properties: dict[str, str | int] = Field(default_factory=dict)
    representation_property: str | None = None
    bridge_uid: str | None = Field(default=None, description="Parent node id, if any")
    timestamp: float = Field(default_factory=time.time)
