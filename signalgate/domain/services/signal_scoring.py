"""
SignalGate – Domain Service: Signal Scoring Policies
====================================================
Two independent scoring policies used by the assembler.

POLICIES:
1. TrendMomentumScoring – additive 0-100 score × timeframe weight.
   Decides whether a candidate is emitted (score ≥ 75).
2. CompleteAlgorithmConfidence – 70-95 confidence from volume, volatility,
   stochastic and DMI confirmation. Recorded on the candidate as
   ``model_confidence`` and consumed by the execution scorer.

The two weight sets are independent and each is tested on its own.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from signalgate.domain.entities.signal import Direction, Grade
from signalgate.domain.value_objects.indicator_snapshot import IndicatorSnapshot


TIMEFRAME_WEIGHTS = {
    "1m": 0.8,
    "5m": 1.0,
    "15m": 1.2,
    "1h": 1.5,
    "4h": 1.8,
}


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def timeframe_weight(timeframe: str) -> float:
    """Weight of a timeframe; unknown timeframes are neutral (1.0)."""
    return TIMEFRAME_WEIGHTS.get(timeframe, 1.0)


# ════════════════════════════════════════════════════════════════
#  POLICY 1: TREND / MOMENTUM SCORE
# ════════════════════════════════════════════════════════════════

@dataclass
class TrendMomentumConfig:
    trend_points: float = 20.0
    rsi_max_points: float = 15.0
    rsi_points_per_unit: float = 1.5      # full credit 10 points away from 50
    volume_max_points: float = 10.0
    volume_points_per_unit: float = 20.0  # full credit at volume ratio 1.5
    pullback_points: float = 5.0
    pullback_band: float = 0.02           # price within 2% of ema21
    volatility_points: float = 5.0
    atr_pct_low: float = 1.0              # ATR/price band, exclusive, in %
    atr_pct_high: float = 5.0
    min_score: float = 75.0


class TrendMomentumScoring:
    """
    Additive score of an aligned setup.

    COMPOSITION:
    +20  trend alignment (caller guarantees the EMA stack is aligned)
    +≤15 RSI distance from 50 in the favourable direction
    +≤10 volume ratio above 1
    +5   price within 2% of ema21
    +5   ATR/price strictly between 1% and 5%
    × timeframe weight, clamped to [0, 100]
    """

    def __init__(self, config: TrendMomentumConfig = None):
        self._config = config or TrendMomentumConfig()

    @property
    def min_score(self) -> float:
        return self._config.min_score

    def score(
        self,
        snapshot: IndicatorSnapshot,
        direction: Direction,
        price: float,
    ) -> float:
        cfg = self._config
        total = cfg.trend_points

        if snapshot.rsi14 is not None:
            distance = snapshot.rsi14 - 50.0
            if direction is Direction.SHORT:
                distance = -distance
            total += min(cfg.rsi_max_points, cfg.rsi_points_per_unit * max(0.0, distance))

        if snapshot.volume_ratio is not None:
            excess = max(0.0, snapshot.volume_ratio - 1.0)
            total += min(cfg.volume_max_points, cfg.volume_points_per_unit * excess)

        if snapshot.ema21 and abs(price - snapshot.ema21) / snapshot.ema21 <= cfg.pullback_band:
            total += cfg.pullback_points

        if snapshot.atr14 is not None and price > 0:
            atr_pct = snapshot.atr14 / price * 100.0
            if cfg.atr_pct_low < atr_pct < cfg.atr_pct_high:
                total += cfg.volatility_points

        return clamp(total * timeframe_weight(snapshot.timeframe), 0.0, 100.0)

    def accepts(self, score: float) -> bool:
        return score >= self._config.min_score


# ════════════════════════════════════════════════════════════════
#  POLICY 2: COMPLETE ALGORITHM CONFIDENCE
# ════════════════════════════════════════════════════════════════

@dataclass
class CompleteAlgorithmConfig:
    base: float = 70.0
    volume_threshold: float = 1.5
    volume_max_bonus: float = 15.0
    hvp_threshold: float = 50.0
    hvp_max_bonus: float = 10.0
    stochastic_bonus: float = 3.0
    dmi_bonus: float = 2.0
    min_adx: float = 20.0
    floor: float = 70.0
    ceiling: float = 95.0


class CompleteAlgorithmConfidence:
    """
    Confidence (70-95) of a directional setup.

    FORMULA:
    70
    + min(15, (volume_ratio - 1.5) × 10)  when volume_ratio > 1.5
    + min(10, (hvp - 50) / 5)             when hvp > 50
    + 3 when stochastic confirms (%K > %D long, %K < %D short)
    + 2 when DMI confirms (+DI > -DI long, reverse short, ADX ≥ 20)
    rounded, clamped to [70, 95]
    """

    def __init__(self, config: CompleteAlgorithmConfig = None):
        self._config = config or CompleteAlgorithmConfig()

    def confidence(self, snapshot: IndicatorSnapshot, direction: Direction) -> int:
        cfg = self._config
        conf = cfg.base

        vr = snapshot.volume_ratio
        if vr is not None and vr > cfg.volume_threshold:
            conf += min(cfg.volume_max_bonus, (vr - cfg.volume_threshold) * 10.0)

        hvp = snapshot.hvp
        if hvp is not None and hvp > cfg.hvp_threshold:
            conf += min(cfg.hvp_max_bonus, (hvp - cfg.hvp_threshold) / 5.0)

        if self.stochastic_confirms(snapshot, direction):
            conf += cfg.stochastic_bonus
        if self.dmi_confirms(snapshot, direction):
            conf += cfg.dmi_bonus

        # half-up rounding
        return int(clamp(math.floor(conf + 0.5), cfg.floor, cfg.ceiling))

    @staticmethod
    def stochastic_confirms(snapshot: IndicatorSnapshot, direction: Direction) -> bool:
        k, d = snapshot.stoch_k, snapshot.stoch_d
        if k is None or d is None:
            return False
        return k > d if direction is Direction.LONG else k < d

    def dmi_confirms(self, snapshot: IndicatorSnapshot, direction: Direction) -> bool:
        plus, minus, adx = snapshot.plus_di, snapshot.minus_di, snapshot.adx
        if plus is None or minus is None or adx is None or adx < self._config.min_adx:
            return False
        return plus > minus if direction is Direction.LONG else minus > plus


def grade_from_confidence_and_rr(confidence: float, risk_reward: Optional[float]) -> Grade:
    """
    Grade of the confidence policy.

    conf ≥ 90 and rr ≥ 1.4 → A+
    conf ≥ 85 and rr ≥ 1.3 → A
    conf ≥ 80              → B
    otherwise              → C
    """
    rr = risk_reward or 0.0
    if confidence >= 90 and rr >= 1.4:
        return Grade.A_PLUS
    if confidence >= 85 and rr >= 1.3:
        return Grade.A
    if confidence >= 80:
        return Grade.B
    return Grade.C
