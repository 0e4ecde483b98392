"""
Endb Event Bus — observer registration for store notifications.

Each Endb instance owns its own bus. Nothing is process-wide:
observers are attached explicitly, either at construction
(on_error=...) or later through Endb.on().
"""

from __future__ import annotations

import asyncio
import fnmatch
import inspect
import logging
from typing import Awaitable, Callable, Union

from endb.core.events import Event

logger = logging.getLogger(__name__)

# Handlers may be plain functions or coroutines
EventHandler = Callable[[Event], Union[Awaitable[None], None]]


class EventBus:
    """
    Publish/subscribe event bus.

    Usage:
        bus = EventBus()

        # Subscribe
        bus.on("store:error", my_handler)
        bus.on("store:*", my_wildcard_handler)
        bus.on("*", my_catch_all_handler)

        # Emit
        await bus.emit(Event(type="store:error", data={"error": exc}))
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventHandler]] = {}

    # ━━━ Subscription ━━━

    def on(self, event_type: str, handler: EventHandler) -> None:
        """Subscribe to an event type. Supports wildcards: 'store:*', '*'."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe from an event type."""
        if event_type in self._subscribers:
            self._subscribers[event_type] = [
                h for h in self._subscribers[event_type] if h is not handler
            ]
            if not self._subscribers[event_type]:
                del self._subscribers[event_type]

    # ━━━ Emission ━━━

    async def emit(self, event: Event) -> Event:
        """
        Deliver an event to every matching subscriber.

        Subscribers execute concurrently. A failing subscriber is logged
        and never affects the emitter or the other subscribers.
        """
        handlers = self._find_handlers(event.type)
        if handlers:
            results = await asyncio.gather(
                *(self._call_handler(h, event) for h in handlers),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, Exception):
                    logger.error(
                        f"Subscriber error for {event.type}: {result}",
                        exc_info=result,
                    )
        return event

    def has_subscribers(self, event_type: str) -> bool:
        return bool(self._find_handlers(event_type))

    # ━━━ Internals ━━━

    def _find_handlers(self, event_type: str) -> list[EventHandler]:
        """Find all handlers matching an event type, including wildcards."""
        handlers: list[EventHandler] = []

        for pattern, subs in self._subscribers.items():
            if pattern == event_type or pattern == "*":
                handlers.extend(subs)
            elif "*" in pattern and fnmatch.fnmatch(event_type, pattern):
                handlers.extend(subs)

        return handlers

    @staticmethod
    async def _call_handler(handler: EventHandler, event: Event) -> None:
        result = handler(event)
        if inspect.isawaitable(result):
            await result
