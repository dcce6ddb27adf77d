"""
SignalGate – Domain Service: Indicator Calculator
=================================================
Pure technical indicator math over oldest → newest sequences.

Every series function returns a TAIL-ALIGNED list: the last element
belongs to the last input bar. Not enough input gives an empty (or
shorter) list, never an exception; callers read the current value with
``IndicatorCalculator.last(series)`` and treat None as "unavailable".

ADVANTAGES:
- Unit-testable without mocks
- No third-party dependencies in the domain
- Explicit, auditable formulas
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from signalgate.domain.entities.bar import OhlcvBar
from signalgate.domain.value_objects.indicator_snapshot import IndicatorSnapshot


# Bars in a 24h window per timeframe (used for change_pct_24h)
BARS_PER_DAY = {
    "1m": 1440,
    "5m": 288,
    "15m": 96,
    "30m": 48,
    "1h": 24,
    "4h": 6,
    "1d": 1,
}


class IndicatorCalculator:
    """
    Stateless calculator of technical indicators.

    All methods are static; the class only groups the formulas.
    """

    @staticmethod
    def last(series: Sequence[float]) -> Optional[float]:
        """Current-bar value of a tail-aligned series, None when empty."""
        return series[-1] if series else None

    # ════════════════════════════════════════════════════════════════
    #  MOVING AVERAGES
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def sma(values: Sequence[float], period: int) -> List[float]:
        """
        Simple Moving Average, one output per full window.

        Args:
            values: Values (oldest first)
            period: Window length

        Returns:
            len(values) - period + 1 values, or [] if not enough data
        """
        if period <= 0 or len(values) < period:
            return []
        out: List[float] = []
        window_sum = sum(values[:period])
        out.append(window_sum / period)
        for i in range(period, len(values)):
            window_sum += values[i] - values[i - period]
            out.append(window_sum / period)
        return out

    @staticmethod
    def ema(values: Sequence[float], period: int) -> List[float]:
        """
        Exponential Moving Average.

        FORMULA:
        EMA_t = value_t × k + EMA_{t-1} × (1-k)
        k = 2 / (period + 1)

        SEED:
        First EMA = SMA of the first `period` values.
        """
        if period <= 0 or len(values) < period:
            return []
        k = 2.0 / (period + 1)
        ema = sum(values[:period]) / period
        out = [ema]
        for value in values[period:]:
            ema = value * k + ema * (1 - k)
            out.append(ema)
        return out

    # ════════════════════════════════════════════════════════════════
    #  OSCILLATORS
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def rsi(values: Sequence[float], period: int = 14) -> List[float]:
        """
        Relative Strength Index.

        FORMULA (per output point, trailing `period` changes):
        RSI = 100 - 100 / (1 + avg_gain / avg_loss)
        avg_loss == 0 → 100

        Returns:
            len(values) - period values in [0, 100]
        """
        if period <= 0 or len(values) < period + 1:
            return []
        changes = [values[i] - values[i - 1] for i in range(1, len(values))]
        gains = [max(0.0, c) for c in changes]
        losses = [max(0.0, -c) for c in changes]

        out: List[float] = []
        for end in range(period, len(changes) + 1):
            avg_gain = sum(gains[end - period:end]) / period
            avg_loss = sum(losses[end - period:end]) / period
            if avg_loss == 0:
                out.append(100.0)
                continue
            rs = avg_gain / avg_loss
            out.append(100.0 - 100.0 / (1.0 + rs))
        return out

    @staticmethod
    def stochastic(
        bars: Sequence[OhlcvBar],
        k_period: int = 14,
        d_period: int = 3,
    ) -> Tuple[List[float], List[float]]:
        """
        Stochastic oscillator.

        %K = 100 × (close - lowest_low) / (highest_high - lowest_low)
        %D = SMA(%K, d_period)
        A flat window (highest == lowest) gives %K = 50.

        Returns:
            (%K series, %D series), both tail-aligned
        """
        if k_period <= 0 or len(bars) < k_period:
            return [], []
        k_values: List[float] = []
        for end in range(k_period, len(bars) + 1):
            window = bars[end - k_period:end]
            highest = max(b.high for b in window)
            lowest = min(b.low for b in window)
            close = window[-1].close
            if highest == lowest:
                k_values.append(50.0)
            else:
                k_values.append((close - lowest) / (highest - lowest) * 100.0)
        return k_values, IndicatorCalculator.sma(k_values, d_period)

    # ════════════════════════════════════════════════════════════════
    #  VOLATILITY / TREND STRENGTH
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def true_range(bars: Sequence[OhlcvBar]) -> List[float]:
        """True range per bar; the first bar has no previous close and is dropped."""
        out: List[float] = []
        for i in range(1, len(bars)):
            cur, prev = bars[i], bars[i - 1]
            out.append(max(
                cur.high - cur.low,
                abs(cur.high - prev.close),
                abs(cur.low - prev.close),
            ))
        return out

    @staticmethod
    def atr(bars: Sequence[OhlcvBar], period: int = 14) -> List[float]:
        """Average True Range = SMA(true range, period)."""
        return IndicatorCalculator.sma(IndicatorCalculator.true_range(bars), period)

    @staticmethod
    def dmi_adx(
        bars: Sequence[OhlcvBar],
        period: int = 13,
    ) -> Tuple[List[float], List[float], List[float]]:
        """
        Directional Movement Index with ADX (Wilder).

        STEPS:
        1. +DM / -DM / TR per bar
        2. Wilder smoothing: S_t = S_{t-1} - S_{t-1}/n + x_t, seeded with
           the sum of the first n values
        3. +DI = 100 × S(+DM) / S(TR), -DI likewise
        4. DX = 100 × |+DI - -DI| / (+DI + -DI)
        5. ADX = Wilder average of DX, seeded with the mean of the first n DX

        Zero denominators give 0 instead of raising.

        Returns:
            (adx, plus_di, minus_di) series, each tail-aligned
        """
        if period <= 0 or len(bars) < period + 1:
            return [], [], []

        plus_dm: List[float] = []
        minus_dm: List[float] = []
        for i in range(1, len(bars)):
            up_move = bars[i].high - bars[i - 1].high
            down_move = bars[i - 1].low - bars[i].low
            plus_dm.append(up_move if up_move > down_move and up_move > 0 else 0.0)
            minus_dm.append(down_move if down_move > up_move and down_move > 0 else 0.0)
        tr = IndicatorCalculator.true_range(bars)

        s_plus = sum(plus_dm[:period])
        s_minus = sum(minus_dm[:period])
        s_tr = sum(tr[:period])

        plus_di: List[float] = []
        minus_di: List[float] = []
        dx: List[float] = []
        for i in range(period - 1, len(tr)):
            if i >= period:
                s_plus = s_plus - s_plus / period + plus_dm[i]
                s_minus = s_minus - s_minus / period + minus_dm[i]
                s_tr = s_tr - s_tr / period + tr[i]
            p_di = 100.0 * s_plus / s_tr if s_tr else 0.0
            m_di = 100.0 * s_minus / s_tr if s_tr else 0.0
            di_sum = p_di + m_di
            plus_di.append(p_di)
            minus_di.append(m_di)
            dx.append(100.0 * abs(p_di - m_di) / di_sum if di_sum else 0.0)

        adx: List[float] = []
        if len(dx) >= period:
            value = sum(dx[:period]) / period
            adx.append(value)
            for d in dx[period:]:
                value = (value * (period - 1) + d) / period
                adx.append(value)
        return adx, plus_di, minus_di

    @staticmethod
    def hvp(closes: Sequence[float], period: int = 21) -> Optional[float]:
        """
        Historical volatility percentage (annualised).

        FORMULA:
        r_i = ln(close_i / close_{i-1}) over the last `period` returns
        HVP = population_std(r) × √252 × 100
        """
        if period <= 0 or len(closes) < period + 1:
            return None
        window = closes[-(period + 1):]
        if any(c <= 0 for c in window):
            return None
        returns = [math.log(window[i] / window[i - 1]) for i in range(1, len(window))]
        mean = sum(returns) / len(returns)
        variance = sum((r - mean) ** 2 for r in returns) / len(returns)
        return math.sqrt(variance) * math.sqrt(252) * 100.0

    # ════════════════════════════════════════════════════════════════
    #  VOLUME / CHANGE
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def volume_ratio(volumes: Sequence[float], period: int = 20) -> Optional[float]:
        """Current volume / SMA(volume, period); None without data or zero average."""
        average = IndicatorCalculator.last(IndicatorCalculator.sma(volumes, period))
        if not average:
            return None
        return volumes[-1] / average

    @staticmethod
    def change_pct(closes: Sequence[float], lookback: int) -> Optional[float]:
        """Percentage change of the last close vs the close `lookback` bars earlier."""
        if lookback <= 0 or len(closes) <= lookback:
            return None
        base = closes[-1 - lookback]
        if base == 0:
            return None
        return (closes[-1] - base) / base * 100.0

    # ════════════════════════════════════════════════════════════════
    #  SNAPSHOT
    # ════════════════════════════════════════════════════════════════

    @classmethod
    def build_snapshot(
        cls,
        symbol: str,
        timeframe: str,
        bars: Sequence[OhlcvBar],
    ) -> IndicatorSnapshot:
        """
        Current-bar values of every indicator used by the assembler.

        Indicators without enough history are left as None.
        """
        closes = [b.close for b in bars]
        volumes = [b.volume for b in bars]

        adx, plus_di, minus_di = cls.dmi_adx(bars, 13)
        stoch_k, stoch_d = cls.stochastic(bars, 14, 3)

        return IndicatorSnapshot(
            symbol=symbol,
            timeframe=timeframe,
            price=closes[-1] if closes else None,
            rsi14=cls.last(cls.rsi(closes, 14)),
            ema21=cls.last(cls.ema(closes, 21)),
            ema50=cls.last(cls.ema(closes, 50)),
            sma200=cls.last(cls.sma(closes, 200)),
            atr14=cls.last(cls.atr(bars, 14)),
            adx=cls.last(adx),
            plus_di=cls.last(plus_di),
            minus_di=cls.last(minus_di),
            stoch_k=cls.last(stoch_k),
            stoch_d=cls.last(stoch_d),
            volume=volumes[-1] if volumes else None,
            volume_ratio=cls.volume_ratio(volumes, 20),
            change_pct_24h=cls.change_pct(closes, BARS_PER_DAY.get(timeframe, 24)),
            hvp=cls.hvp(closes, 21),
        )
