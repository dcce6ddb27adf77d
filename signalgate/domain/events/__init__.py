"""Domain events."""
from signalgate.domain.events.domain_events import (
    DomainEvent,
    SignalGenerated,
    SignalFiltered,
    OrderFilled,
    OrderFailed,
)

__all__ = [
    "DomainEvent",
    "SignalGenerated",
    "SignalFiltered",
    "OrderFilled",
    "OrderFailed",
]
