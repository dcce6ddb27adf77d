"""Shared fixtures: fake collaborators and bar/signal builders."""

from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from signalgate.application.ports.event_publisher import IEventPublisher
from signalgate.application.ports.market_data_provider import IMarketDataProvider
from signalgate.domain.entities.bar import OhlcvBar
from signalgate.domain.entities.signal import CandidateSignal, Direction
from signalgate.domain.value_objects.ticker import Ticker


def build_trending_bars(count: int = 260, slope: float = 0.1, last_volume: float = 300.0) -> List[OhlcvBar]:
    """
    Uptrend with a ±1 zigzag: RSI stays near 52, ATR ≈ 2.5 and the
    last close sits ~1.6% above ema21. The last bar carries a volume
    spike so the volume ratio confirms.
    """
    bars = []
    for i in range(count):
        close = 100.0 + slope * i + (1.0 if i % 2 else -1.0)
        bars.append(
            OhlcvBar(
                open=close,
                high=close + 0.5,
                low=close - 0.5,
                close=close,
                volume=last_volume if i == count - 1 else 100.0,
                timestamp=i * 14_400_000,
            )
        )
    return bars


class FakeMarketData(IMarketDataProvider):
    """Canned market data per symbol; unknown symbols have no ticker."""

    def __init__(
        self,
        bars: Optional[Dict[str, List[OhlcvBar]]] = None,
        tickers: Optional[Dict[str, Ticker]] = None,
        depth: float = 50_000.0,
    ):
        self.bars = bars or {}
        self.tickers = tickers or {}
        self.depth = depth
        self.bar_requests: List[tuple] = []

    async def get_bars(self, symbol, timeframe, limit=200):
        self.bar_requests.append((symbol, timeframe, limit))
        return list(self.bars.get(symbol, []))

    async def get_ticker(self, symbol):
        return self.tickers.get(symbol)

    async def get_price(self, symbol):
        ticker = self.tickers.get(symbol)
        return ticker.price if ticker else None

    async def get_orderbook_depth(self, symbol):
        return self.depth


class RecordingPublisher(IEventPublisher):

    def __init__(self):
        self.events = []

    async def publish(self, event) -> None:
        self.events.append(event)

    def of_type(self, cls) -> list:
        return [e for e in self.events if isinstance(e, cls)]


@pytest.fixture
def trending_bars() -> List[OhlcvBar]:
    return build_trending_bars()


@pytest.fixture
def btc_ticker(trending_bars) -> Ticker:
    price = trending_bars[-1].close
    return Ticker(symbol="BTCUSDT", price=price, bid=price - 0.01, ask=price + 0.01)


@pytest.fixture
def market_data(trending_bars, btc_ticker) -> FakeMarketData:
    return FakeMarketData(
        bars={"BTCUSDT": trending_bars},
        tickers={"BTCUSDT": btc_ticker},
    )


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def make_candidate():
    """Factory of candidates that pass the default gate unless overridden."""

    def _make(**overrides) -> CandidateSignal:
        fields = dict(
            symbol="BTCUSDT",
            timeframe="15m",
            direction=Direction.LONG,
            entry_price=100.0,
            stop_loss=98.0,
            take_profit=106.0,
            raw_score=80.0,
            atr_pct=1.5,
            trend_fit=1.0,
            pullback_fit=1.0,
            spread_bps=2.0,
            orderbook_depth_usdt=5_000.0,
            risk_reward=3.0,
            model_confidence=100.0,
        )
        fields.update(overrides)
        return CandidateSignal(**fields)

    return _make
