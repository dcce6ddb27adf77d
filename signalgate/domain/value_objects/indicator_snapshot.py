"""
SignalGate – Domain Value Object: IndicatorSnapshot
===================================================
Current-bar values of every indicator for one symbol/timeframe.

Any field may be None when the indicator could not be computed
(insufficient history). Callers treat None as "unavailable".
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class IndicatorSnapshot:
    symbol: str
    timeframe: str
    price: Optional[float] = None
    rsi14: Optional[float] = None
    ema21: Optional[float] = None
    ema50: Optional[float] = None
    sma200: Optional[float] = None
    atr14: Optional[float] = None
    adx: Optional[float] = None
    plus_di: Optional[float] = None
    minus_di: Optional[float] = None
    stoch_k: Optional[float] = None
    stoch_d: Optional[float] = None
    volume: Optional[float] = None
    volume_ratio: Optional[float] = None
    change_pct_24h: Optional[float] = None
    hvp: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)
