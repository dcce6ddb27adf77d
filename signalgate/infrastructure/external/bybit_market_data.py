"""
Bybit V5 Market Data Adapter.

Implements IMarketDataProvider on the public V5 REST API
(``/v5/market/kline``, ``/v5/market/tickers``, ``/v5/market/orderbook``).
Exchange payloads are normalised here; nothing Bybit-specific leaks
past this module.

FAILURES:
Transport errors and nonzero retCodes are logged and absorbed: bars →
[], ticker/price → None, depth → 0.0. The scanner treats those as
"data unavailable" and skips the symbol for this cycle.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import httpx

from signalgate.application.ports.market_data_provider import IMarketDataProvider
from signalgate.domain.entities.bar import OhlcvBar
from signalgate.domain.value_objects.ticker import Ticker
from signalgate.infrastructure.external.exceptions import ExchangeError, TransportError
from signalgate.shared.logging.logger import get_logger

logger = get_logger("bybit_market_data")

TIMEFRAME_INTERVALS = {
    "1m": "1",
    "3m": "3",
    "5m": "5",
    "15m": "15",
    "30m": "30",
    "1h": "60",
    "2h": "120",
    "4h": "240",
    "1d": "D",
}

ORDERBOOK_LEVELS = 25


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_klines(rows: List[List[Any]], drop_partial: bool = True) -> List[OhlcvBar]:
    """
    Bybit kline rows ``[start, open, high, low, close, volume, turnover]``
    (newest first) → bars oldest first.

    The newest row is the bar still forming; it is dropped so every
    indicator sees closed bars only. Malformed rows are skipped.
    """
    if drop_partial:
        rows = rows[1:]
    bars = []
    for row in reversed(rows):
        try:
            bars.append(
                OhlcvBar(
                    open=float(row[1]),
                    high=float(row[2]),
                    low=float(row[3]),
                    close=float(row[4]),
                    volume=float(row[5]),
                    timestamp=int(row[0]),
                )
            )
        except (TypeError, ValueError, IndexError):
            logger.debug("Skipping malformed kline row %r", row)
    return bars


def parse_ticker(symbol: str, item: Dict[str, Any]) -> Optional[Ticker]:
    price = _to_float(item.get("lastPrice"))
    if not price:
        return None
    change = _to_float(item.get("price24hPcnt")) or 0.0
    return Ticker(
        symbol=symbol,
        price=price,
        bid=_to_float(item.get("bid1Price")),
        ask=_to_float(item.get("ask1Price")),
        volume24h=_to_float(item.get("volume24h")) or 0.0,
        # Bybit sends a fraction (0.0123 = 1.23 %)
        change_pct_24h=change * 100.0,
    )


def orderbook_depth(result: Dict[str, Any]) -> float:
    """Quote-currency depth of the thinner side of the book."""
    def side_value(levels) -> float:
        total = 0.0
        for level in levels or []:
            price = _to_float(level[0]) or 0.0
            size = _to_float(level[1]) or 0.0
            total += price * size
        return total

    bids = side_value(result.get("b"))
    asks = side_value(result.get("a"))
    return min(bids, asks)


class BybitMarketDataAdapter(IMarketDataProvider):
    """
    IMarketDataProvider over Bybit V5 public endpoints.

    The httpx client can be injected (tests pass one built on
    ``httpx.MockTransport``); otherwise one is created with the
    configured timeout and closed by ``close()``.
    """

    def __init__(
        self,
        base_url: str,
        category: str = "linear",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._category = category
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

        # Stats
        self._requests: int = 0
        self._failures: int = 0
        self._last_request_time: float = 0.0

    # ════════════════════════════════════════════════════════════════
    #  IMarketDataProvider Implementation
    # ════════════════════════════════════════════════════════════════

    async def get_bars(self, symbol: str, timeframe: str, limit: int = 200) -> List[OhlcvBar]:
        interval = TIMEFRAME_INTERVALS.get(timeframe)
        if interval is None:
            logger.warning("Unsupported timeframe %s for %s", timeframe, symbol)
            return []
        try:
            # +1 for the forming bar that parse_klines drops
            result = await self._get(
                "/v5/market/kline",
                {
                    "category": self._category,
                    "symbol": symbol,
                    "interval": interval,
                    "limit": min(limit + 1, 1000),
                },
            )
        except (TransportError, ExchangeError) as e:
            logger.warning("Klines unavailable for %s %s: %s", symbol, timeframe, e)
            return []
        return parse_klines(result.get("list") or [])

    async def get_ticker(self, symbol: str) -> Optional[Ticker]:
        try:
            result = await self._get(
                "/v5/market/tickers", {"category": self._category, "symbol": symbol},
            )
        except (TransportError, ExchangeError) as e:
            logger.warning("Ticker unavailable for %s: %s", symbol, e)
            return None
        items = result.get("list") or []
        if not items:
            return None
        return parse_ticker(symbol, items[0])

    async def get_price(self, symbol: str) -> Optional[float]:
        ticker = await self.get_ticker(symbol)
        return ticker.price if ticker else None

    async def get_orderbook_depth(self, symbol: str) -> float:
        try:
            result = await self._get(
                "/v5/market/orderbook",
                {"category": self._category, "symbol": symbol, "limit": ORDERBOOK_LEVELS},
            )
        except (TransportError, ExchangeError) as e:
            logger.warning("Order book unavailable for %s: %s", symbol, e)
            return 0.0
        return orderbook_depth(result)

    # ════════════════════════════════════════════════════════════════
    #  HTTP
    # ════════════════════════════════════════════════════════════════

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self._requests += 1
        self._last_request_time = time.time()
        try:
            response = await self._client.get(f"{self._base_url}{path}", params=params)
        except httpx.HTTPError as e:
            self._failures += 1
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if response.status_code >= 500:
            self._failures += 1
            raise TransportError(f"HTTP {response.status_code}")
        try:
            payload = response.json()
        except ValueError as e:
            self._failures += 1
            raise TransportError(f"invalid JSON (HTTP {response.status_code})") from e

        ret_code = int(payload.get("retCode", -1))
        if ret_code != 0:
            self._failures += 1
            raise ExchangeError.from_response(ret_code, payload.get("retMsg", ""))
        return payload.get("result") or {}

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def get_stats(self) -> dict:
        return {
            "requests": self._requests,
            "failures": self._failures,
            "last_request_time": self._last_request_time,
        }
