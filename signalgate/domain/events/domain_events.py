"""
SignalGate – Domain Events
==========================
Immutable facts published on the event bus.

CONSUMERS:
- Alert dispatch (signal found, order filled, order failed)
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event."""

    event_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class SignalGenerated(DomainEvent):
    """A graded signal was accepted by the gate."""

    signal_id: str = ""
    symbol: str = ""
    timeframe: str = ""
    direction: str = ""  # LONG | SHORT
    entry: float = 0.0
    stop_loss: float = 0.0
    take_profit: float = 0.0
    execution_score: float = 0.0
    grade: str = ""
    auto_tradeable: bool = False


@dataclass(frozen=True)
class SignalFiltered(DomainEvent):
    """A candidate was rejected by the quality gate."""

    signal_id: str = ""
    symbol: str = ""
    timeframe: str = ""
    direction: str = ""
    filter_reason: str = ""  # banned_timeframe, spread, depth, ...


@dataclass(frozen=True)
class OrderFilled(DomainEvent):
    """An order reached FILLED (live or paper)."""

    order_id: str = ""
    signal_id: str = ""
    symbol: str = ""
    side: str = ""
    quantity: float = 0.0
    price: float = 0.0
    exchange_order_id: str = ""
    paper: bool = False


@dataclass(frozen=True)
class OrderFailed(DomainEvent):
    """An order ended REJECTED, ERROR or THROTTLED."""

    order_id: str = ""
    signal_id: str = ""
    symbol: str = ""
    outcome: str = ""
    category: str = ""
    message: str = ""
    attempts: int = 0
