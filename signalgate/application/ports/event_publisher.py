"""
SignalGate – Application Port: Event Publisher
==============================================
Use cases publish domain events; infrastructure decides how they are
delivered (in-process bus, message queue, ...).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from signalgate.domain.events.domain_events import DomainEvent


class IEventPublisher(ABC):
    """
    Domain event publisher.

    POSSIBLE IMPLEMENTATIONS:
    - EventBusAdapter (asyncio fan-out)
    - Message queue publishers
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Publish one event to every handler of its type."""
