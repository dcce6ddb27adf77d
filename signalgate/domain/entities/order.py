"""
SignalGate – Domain Entity: Order
=================================
Order record of the execution gateway.

STATE MACHINE:
    NEW → SIGNED → SENT → FILLED | REJECTED | ERROR

Transitions are APPEND-ONLY: ``transition()`` returns a new Order and the
previous record stays untouched in the order log. An order can only be
SENT once it has been SIGNED.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from signalgate.domain.exceptions.domain_errors import OrderStateError


class OrderSide(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class OrderStatus(str, Enum):
    """Lifecycle states of an order."""
    NEW = "NEW"
    SIGNED = "SIGNED"
    SENT = "SENT"
    FILLED = "FILLED"
    REJECTED = "REJECTED"
    ERROR = "ERROR"


_ALLOWED = {
    OrderStatus.NEW: {OrderStatus.SIGNED, OrderStatus.REJECTED, OrderStatus.ERROR},
    OrderStatus.SIGNED: {OrderStatus.SENT, OrderStatus.ERROR},
    OrderStatus.SENT: {OrderStatus.FILLED, OrderStatus.REJECTED, OrderStatus.ERROR},
    OrderStatus.FILLED: set(),
    OrderStatus.REJECTED: set(),
    OrderStatus.ERROR: set(),
}

TERMINAL_STATES = frozenset({OrderStatus.FILLED, OrderStatus.REJECTED, OrderStatus.ERROR})


@dataclass(frozen=True, slots=True)
class Order:
    """Immutable snapshot of an order at one point of its lifecycle."""

    symbol: str
    side: OrderSide
    quantity: float
    order_type: str = "Market"
    status: OrderStatus = OrderStatus.NEW
    exchange_order_id: Optional[str] = None
    attempt: int = 1
    last_error: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    signal_id: Optional[str] = None
    paper: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    created_at: float = field(default_factory=time.time)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def transition(self, status: OrderStatus, **changes) -> "Order":
        """
        New record in ``status``; the id is kept so the log groups by order.

        Raises:
            OrderStateError: if the transition is not allowed.
        """
        if status not in _ALLOWED[self.status]:
            raise OrderStateError(
                f"Illegal order transition {self.status.value} → {status.value}",
                order_id=self.id,
            )
        return replace(self, status=status, created_at=time.time(), **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "signal_id": self.signal_id,
            "symbol": self.symbol,
            "side": self.side.value,
            "quantity": self.quantity,
            "order_type": self.order_type,
            "status": self.status.value,
            "exchange_order_id": self.exchange_order_id,
            "attempt": self.attempt,
            "last_error": self.last_error,
            "category": self.category,
            "price": self.price,
            "paper": self.paper,
            "created_at": self.created_at,
        }
