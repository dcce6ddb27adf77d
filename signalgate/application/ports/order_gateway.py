"""
SignalGate – Application Port: Order Gateway
============================================
Interface for submitting orders to an exchange.

Expected failures (rejections, network errors, throttling) are
returned as an OrderResult, never raised.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from signalgate.domain.entities.order import Order, OrderSide


class OrderOutcome(str, Enum):
    FILLED = "FILLED"
    REJECTED = "REJECTED"
    ERROR = "ERROR"
    THROTTLED = "THROTTLED"
    CANCELLED = "CANCELLED"


class ErrorCategory(str, Enum):
    """Normalised failure category of an order attempt."""
    INVALID_SIGNATURE = "invalid signature"
    INVALID_KEY = "invalid key"
    PERMISSION_DENIED = "permission denied"
    INSUFFICIENT_BALANCE = "insufficient balance"
    BAD_REQUEST = "bad request"
    NETWORK = "network"
    RATE_LIMITED = "rate limited"
    UNSUPPORTED_SYMBOL = "unsupported symbol"
    INVALID_QUANTITY = "invalid quantity"
    UNKNOWN = "unknown"


@dataclass
class OrderResult:
    """
    Typed result of a gateway call.

    ``order`` is the final record; ``history`` every record appended to
    the order log during the call.
    """
    outcome: OrderOutcome
    order: Optional[Order] = None
    attempts: int = 0
    category: Optional[ErrorCategory] = None
    message: Optional[str] = None
    history: List[Order] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome in (OrderOutcome.FILLED, OrderOutcome.CANCELLED)

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "order": self.order.to_dict() if self.order else None,
            "attempts": self.attempts,
            "category": self.category.value if self.category else None,
            "message": self.message,
        }


class IOrderGateway(ABC):
    """
    Exchange order gateway.

    POSSIBLE IMPLEMENTATIONS:
    - BybitGateway (signed V5 REST, with paper mode)
    """

    @abstractmethod
    async def get_price(self, symbol: str) -> Optional[float]:
        """Current price used to size orders."""

    @abstractmethod
    async def ensure_leverage(self, symbol: str, leverage: int) -> bool:
        """Best-effort leverage setup; True when applied or already set."""

    @abstractmethod
    async def place_order(
        self,
        symbol: str,
        side: OrderSide,
        usd_amount: float,
        order_type: str = "Market",
        signal_id: Optional[str] = None,
        price_hint: Optional[float] = None,
    ) -> OrderResult:
        """
        Size and submit an order.

        Args:
            symbol: Exchange symbol
            side: Buy / Sell
            usd_amount: Notional in quote currency
            order_type: "Market" or "Limit"
            signal_id: Originating signal, recorded on the order
            price_hint: Price known to the caller; paper fills use it
                instead of looking the price up
        """

    @abstractmethod
    async def cancel_order(self, symbol: str, order_id: str) -> OrderResult:
        """Cancel an open order by exchange id."""
