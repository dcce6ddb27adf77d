"""
SignalGate – Domain Layer
=========================
Pure core of the system. ZERO external dependencies.

- entities/: OhlcvBar, CandidateSignal, GradedSignal, Order, AlertEvent
- value_objects/: IndicatorSnapshot, Ticker
- services/: indicators, assembler, scoring policies, gate, scorer
- repositories/: abstract interfaces (ABCs)
- events/: domain events
- exceptions/: domain exceptions

DEPENDENCY RULE:
Nothing here imports from application/, infrastructure/, presentation/
or any framework (SQLAlchemy, FastAPI, httpx, ...).
"""

from signalgate.domain.entities import (
    OhlcvBar,
    CandidateSignal,
    GradedSignal,
    Direction,
    Grade,
    Order,
    OrderSide,
    OrderStatus,
    AlertEvent,
    Severity,
)
from signalgate.domain.value_objects import IndicatorSnapshot, Ticker

__all__ = [
    "OhlcvBar",
    "CandidateSignal",
    "GradedSignal",
    "Direction",
    "Grade",
    "Order",
    "OrderSide",
    "OrderStatus",
    "AlertEvent",
    "Severity",
    "IndicatorSnapshot",
    "Ticker",
]
