"""
SignalGate – Domain Entity: OhlcvBar
====================================
Closed OHLCV bar as returned by the exchange kline endpoint.

- frozen=True → a closed bar never changes, so indicators computed on
  it are reproducible.
- Sequences of bars are always ordered oldest → newest.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OhlcvBar:
    """Single OHLCV bar with its opening timestamp (epoch ms)."""

    open: float
    high: float
    low: float
    close: float
    volume: float
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
            "timestamp": self.timestamp,
        }
