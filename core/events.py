"""
In-process Event Bus.

Observer-style publish/subscribe for domain events. Subscribers are plain
callables receiving a DomainEvent. Delivery is synchronous and in-process;
anything that needs to leave the process (webhooks, queues) subscribes here
and owns its own delivery.
"""

import logging
import threading
from typing import Callable, Dict, List

from .domain import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class EventBus:
    """
    Routes published events to the handlers subscribed to their type.

    A failing handler is logged and skipped so that one broken subscriber
    cannot block the others or the publisher.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[EventHandler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Register a handler for an event type (idempotent)."""
        with self._lock:
            handlers = self._subscribers.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

    def subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def publish(self, event: DomainEvent) -> int:
        """
        Publish an event to all subscribers of its type.

        Returns:
            Number of handlers that completed without raising
        """
        with self._lock:
            handlers = list(self._subscribers.get(event.event_type, []))

        if not handlers:
            logger.debug(f"No subscribers for event type: {event.event_type}")
            return 0

        logger.debug(f"Publishing event {event.event_type} to {len(handlers)} subscribers")

        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.exception(f"Error in event handler for {event.event_type}")
        return delivered
