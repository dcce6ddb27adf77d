"""
Event Bus Adapter.

In-process IEventPublisher: each domain event is handed to the async
handlers registered for its type (alert dispatch). The domain never
depends on the bus.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, List

from signalgate.application.ports.event_publisher import IEventPublisher
from signalgate.domain.events.domain_events import DomainEvent
from signalgate.shared.logging.logger import get_logger

logger = get_logger("event_bus_adapter")

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBusAdapter(IEventPublisher):
    """
    IEventPublisher over per-type handler lists.

    Handlers run in registration order; a failing handler is logged and
    does not stop the others.
    """

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._published: int = 0

    @property
    def published(self) -> int:
        return self._published

    async def publish(self, event: DomainEvent) -> None:
        event_type = event.__class__.__name__
        self._published += 1
        logger.debug("Publishing event: %s", event_type)

        for handler in self._handlers.get(event_type, []):
            try:
                await handler(event)
            except Exception:
                logger.exception("Error in handler for %s", event_type)

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.info("Handler registered for event type: %s", event_type)

    def register_handlers(self, handlers: Dict[str, EventHandler]) -> None:
        for event_type, handler in handlers.items():
            self.register_handler(event_type, handler)
