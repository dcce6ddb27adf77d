"""Domain entities."""
from signalgate.domain.entities.bar import OhlcvBar
from signalgate.domain.entities.signal import CandidateSignal, GradedSignal, Direction, Grade
from signalgate.domain.entities.order import Order, OrderSide, OrderStatus
from signalgate.domain.entities.alert import AlertEvent, Severity

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
]
