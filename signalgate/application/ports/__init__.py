"""Application ports - Interfaces to infrastructure."""
from signalgate.application.ports.event_publisher import IEventPublisher
from signalgate.application.ports.market_data_provider import IMarketDataProvider
from signalgate.application.ports.order_gateway import (
    IOrderGateway,
    OrderResult,
    OrderOutcome,
    ErrorCategory,
)
from signalgate.application.ports.alert_channel import IAlertChannel, ChannelResult
from signalgate.application.ports.dedupe_store import IDedupeStore

__all__ = [
    "IEventPublisher",
    "IMarketDataProvider",
    "IOrderGateway",
    "OrderResult",
    "OrderOutcome",
    "ErrorCategory",
    "IAlertChannel",
    "ChannelResult",
    "IDedupeStore",
]
