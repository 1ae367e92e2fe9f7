"""
Synchronous pub/sub for invoice core events.

Handlers run in the publisher's thread, in subscription order, before
publish() returns. A failing handler is logged and skipped; the state
change that produced the event has already been committed.
"""

import logging
from collections import defaultdict
from typing import Callable

from core.events import AppEvent

logger = logging.getLogger(__name__)

Handler = Callable[[AppEvent], None]
Unsubscribe = Callable[[], None]


def _topic(event_type: str | type[AppEvent]) -> str:
    return event_type if isinstance(event_type, str) else event_type.__name__


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__name__", repr(handler))


class EventBus:
    """
    Routes each published event to the handlers registered for its class.

    Topics are event class names; subscribe() also accepts the class itself.

    Usage:
        bus = EventBus()
        stop = bus.subscribe(InvoiceStateChanged, render)
        bus.publish(InvoiceStateChanged.create(state))
        stop()
    """

    def __init__(self):
        self._handlers: defaultdict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: str | type[AppEvent], handler: Handler) -> Unsubscribe:
        """
        Register handler for one event type.

        Returns:
            A callable that removes this registration. Calling it twice is harmless.
        """
        topic = _topic(event_type)
        self._handlers[topic].append(handler)

        def unsubscribe() -> None:
            registered = self._handlers.get(topic)
            if registered and handler in registered:
                registered.remove(handler)

        return unsubscribe

    def handler_count(self, event_type: str | type[AppEvent]) -> int:
        return len(self._handlers.get(_topic(event_type), ()))

    def publish(self, event: AppEvent) -> int:
        """
        Deliver event to every current handler of its type.

        Handlers added or removed during delivery take effect on the next publish.

        Returns:
            Number of handlers that raised
        """
        topic = type(event).__name__
        snapshot = tuple(self._handlers.get(topic, ()))

        failures = 0
        for handler in snapshot:
            try:
                handler(event)
            except Exception:
                failures += 1
                logger.exception(
                    "Handler %s failed for %s (event_id=%s)",
                    _handler_name(handler), topic, event.event_id,
                )
        return failures
