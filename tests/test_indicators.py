from __future__ import annotations

import pytest

from signalgate.domain.entities.bar import OhlcvBar
from signalgate.domain.services.indicator_calculator import IndicatorCalculator


def _flat_bars(closes, spread=1.0):
    return [
        OhlcvBar(open=c, high=c + spread, low=c - spread, close=c, volume=10.0, timestamp=i)
        for i, c in enumerate(closes)
    ]


def test_sma_one_value_per_full_window() -> None:
    assert IndicatorCalculator.sma([1, 2, 3, 4, 5], 3) == [2.0, 3.0, 4.0]
    assert IndicatorCalculator.sma([1, 2], 3) == []


def test_ema_seeded_with_sma() -> None:
    # k = 0.5 for period 3
    assert IndicatorCalculator.ema([1, 2, 3, 4, 5], 3) == pytest.approx([2.0, 3.0, 4.0])
    assert IndicatorCalculator.ema([1.0], 3) == []


def test_rsi_bounds() -> None:
    rising = [float(i) for i in range(30)]
    assert IndicatorCalculator.rsi(rising, 14)[-1] == 100.0

    alternating = [1.0, 2.0] * 10
    assert IndicatorCalculator.rsi(alternating, 2)[-1] == pytest.approx(50.0)

    assert IndicatorCalculator.rsi([1.0] * 14, 14) == []


def test_stochastic_flat_window_is_fifty() -> None:
    bars = [OhlcvBar(1.0, 1.0, 1.0, 1.0, 1.0, i) for i in range(20)]
    k, d = IndicatorCalculator.stochastic(bars, 14, 3)
    assert k[-1] == 50.0
    assert d[-1] == 50.0


def test_atr_constant_range() -> None:
    bars = _flat_bars([100.0] * 20)
    assert IndicatorCalculator.atr(bars, 14)[-1] == pytest.approx(2.0)


def test_adx_strong_uptrend() -> None:
    bars = [
        OhlcvBar(open=i, high=i + 1.0, low=i - 1.0, close=float(i), volume=1.0, timestamp=i)
        for i in range(40)
    ]
    adx, plus_di, minus_di = IndicatorCalculator.dmi_adx(bars, 13)
    assert minus_di[-1] == 0.0
    assert plus_di[-1] > 0.0
    assert adx[-1] == pytest.approx(100.0)


def test_dmi_adx_not_enough_bars() -> None:
    assert IndicatorCalculator.dmi_adx(_flat_bars([1.0] * 5), 13) == ([], [], [])


def test_volume_ratio_and_change() -> None:
    assert IndicatorCalculator.volume_ratio([2.0] * 20) == 1.0
    assert IndicatorCalculator.volume_ratio([0.0] * 20) is None
    assert IndicatorCalculator.change_pct([100.0, 110.0], 1) == pytest.approx(10.0)
    assert IndicatorCalculator.change_pct([100.0], 1) is None


def test_hvp_constant_prices_is_zero() -> None:
    assert IndicatorCalculator.hvp([50.0] * 30, 21) == 0.0
    assert IndicatorCalculator.hvp([50.0] * 5, 21) is None


def test_snapshot_is_deterministic(trending_bars) -> None:
    first = IndicatorCalculator.build_snapshot("BTCUSDT", "4h", trending_bars)
    second = IndicatorCalculator.build_snapshot("BTCUSDT", "4h", trending_bars)
    assert first == second


def test_snapshot_short_history_leaves_gaps() -> None:
    snapshot = IndicatorCalculator.build_snapshot("BTCUSDT", "1h", _flat_bars([10.0] * 30))
    assert snapshot.price == 10.0
    assert snapshot.ema21 is not None
    assert snapshot.ema50 is None
    assert snapshot.sma200 is None


def test_trending_fixture_values(trending_bars) -> None:
    snapshot = IndicatorCalculator.build_snapshot("BTCUSDT", "4h", trending_bars)
    assert snapshot.ema21 > snapshot.ema50 > snapshot.sma200
    assert snapshot.price > snapshot.ema21
    assert snapshot.rsi14 == pytest.approx(52.5)
    assert snapshot.atr14 == pytest.approx(2.5)
    assert snapshot.volume_ratio == pytest.approx(300.0 / 110.0)
