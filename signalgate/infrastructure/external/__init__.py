"""External systems - exchange, alert channels and messaging."""

from signalgate.infrastructure.external.alert_channels import (
    DiscordWebhookChannel,
    RetryingAlertChannel,
    SlackWebhookChannel,
    TelegramChannel,
)
from signalgate.infrastructure.external.bybit_gateway import BybitGateway
from signalgate.infrastructure.external.bybit_market_data import BybitMarketDataAdapter
from signalgate.infrastructure.external.dedupe_guard import DedupeGuard
from signalgate.infrastructure.external.event_bus_adapter import EventBusAdapter
from signalgate.infrastructure.external.exceptions import (
    ExchangeError,
    SigningError,
    TransportError,
)
from signalgate.infrastructure.external.rate_limiter import RateLimiter

__all__ = [
    "BybitGateway",
    "BybitMarketDataAdapter",
    "DedupeGuard",
    "DiscordWebhookChannel",
    "EventBusAdapter",
    "ExchangeError",
    "RateLimiter",
    "RetryingAlertChannel",
    "SigningError",
    "SlackWebhookChannel",
    "TelegramChannel",
    "TransportError",
]
