"""
SignalGate – Domain Value Object: Ticker
========================================
Exchange-agnostic ticker, normalised at the adapter boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Ticker:
    symbol: str
    price: float
    bid: Optional[float] = None
    ask: Optional[float] = None
    volume24h: float = 0.0
    change_pct_24h: float = 0.0

    @property
    def spread_bps(self) -> Optional[float]:
        """(ask - bid) / mid in basis points, None when a side is missing."""
        if not self.bid or not self.ask or self.ask < self.bid:
            return None
        mid = (self.ask + self.bid) / 2.0
        return (self.ask - self.bid) / mid * 10_000

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "price": self.price,
            "bid": self.bid,
            "ask": self.ask,
            "volume24h": self.volume24h,
            "change_pct_24h": self.change_pct_24h,
            "spread_bps": self.spread_bps,
        }
