"""Event bus and observable base for the stores.

The gateway publishes cross-cutting events (authorization expiry) on an
EventBus; the session store subscribes. Stores themselves are Observable
so the presentation layer can re-render on every mutation.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)

AUTHORIZATION_EXPIRED = "authorization_expired"

Handler = Callable[..., Union[None, Awaitable[None]]]
Listener = Callable[[Any], None]


class EventBus:
    """Named-event publish/subscribe channel.

    Handlers may be plain functions or coroutine functions. A failing
    handler is logged and skipped so one subscriber cannot break another.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> Callable[[], None]:
        """Register a handler. Returns a function that removes it again."""
        self._handlers[event].append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return _unsubscribe

    async def publish(self, event: str, **payload: Any) -> None:
        """Deliver an event to every handler, in subscription order."""
        handlers = list(self._handlers.get(event, ()))
        logger.info("Publishing %s to %d handler(s)", event, len(handlers))
        for handler in handlers:
            try:
                result = handler(**payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning("Handler for %s failed: %s", event, e)


class Observable:
    """Mixin holding change listeners for a stateful store."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every mutation."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.warning("Store listener failed: %s", e)
