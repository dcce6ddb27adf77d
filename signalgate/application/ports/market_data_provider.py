"""
SignalGate – Application Port: Market Data Provider
===================================================
Interface for reading market data.

Use cases ask for data; infrastructure decides HOW to get it (exchange
REST API, historical files, fakes in tests).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from signalgate.domain.entities.bar import OhlcvBar
from signalgate.domain.value_objects.ticker import Ticker


class IMarketDataProvider(ABC):
    """
    Market data provider.

    POSSIBLE IMPLEMENTATIONS:
    - BybitMarketDataAdapter (public V5 REST)
    - In-memory fakes (testing)
    """

    @abstractmethod
    async def get_bars(
        self,
        symbol: str,
        timeframe: str,
        limit: int = 200,
    ) -> List[OhlcvBar]:
        """
        Closed bars, oldest → newest.

        Args:
            symbol: Exchange symbol (e.g. "BTCUSDT")
            timeframe: "1m", "5m", "15m", "1h", "4h", ...
            limit: Max bars

        Returns:
            Bars ordered by timestamp ASC; empty when unavailable
        """

    @abstractmethod
    async def get_ticker(self, symbol: str) -> Optional[Ticker]:
        """Normalised ticker, or None if unavailable."""

    @abstractmethod
    async def get_price(self, symbol: str) -> Optional[float]:
        """Last traded price, or None if unavailable."""

    @abstractmethod
    async def get_orderbook_depth(self, symbol: str) -> float:
        """
        Top-of-book depth in quote currency (USDT).

        Returns:
            Depth, or 0.0 when unknown
        """
