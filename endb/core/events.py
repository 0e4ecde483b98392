"""
Endb event types.

Stores publish lifecycle and error events on their bus.
Subscribers receive them either exactly or through wildcards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
import time
import uuid


class EventType:
    """
    Event type constants.

    Hierarchical naming: "category:action"
    Supports wildcard matching: "store:*" matches "store:error"
    """

    STORE_CONNECT = "store:connect"
    STORE_CLOSE = "store:close"
    STORE_ERROR = "store:error"

    # Wildcard
    ALL = "*"


# Short names accepted by Endb.on()
ALIASES = {
    "connect": EventType.STORE_CONNECT,
    "close": EventType.STORE_CLOSE,
    "error": EventType.STORE_ERROR,
}


@dataclass(slots=True)
class Event:
    """
    A single store event.

    `data` carries the event payload; for errors it holds the raised
    exception under "error" and the failing operation under "operation".
    """

    type: str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:16])
    timestamp: float = field(default_factory=time.time)

    @property
    def error(self) -> BaseException | None:
        return self.data.get("error")
