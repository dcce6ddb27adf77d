"""
SignalGate – Domain Service: Signal Rules / Assembler
=====================================================
Turns an IndicatorSnapshot into a CandidateSignal (or nothing).

CONFIRMATION RULES (directionally symmetric):
1. Trend:    LONG  ema21 > ema50 > sma200 and price > ema21
             SHORT ema21 < ema50 < sma200 and price < ema21
2. Momentum: LONG 45 < RSI < 75, SHORT 25 < RSI < 55
3. Volume:   volume_ratio > 1.2

All three must hold. The setup is then scored by TrendMomentumScoring
and rejected below 75. Targets come from RiskCalculator.

NOTE: this service receives ALREADY computed indicators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from signalgate.domain.entities.signal import CandidateSignal, Direction
from signalgate.domain.services.risk_calculator import RiskCalculator
from signalgate.domain.services.signal_scoring import (
    CompleteAlgorithmConfidence,
    TrendMomentumScoring,
    clamp,
)
from signalgate.domain.value_objects.indicator_snapshot import IndicatorSnapshot


REQUIRED_FIELDS = ("ema21", "ema50", "sma200", "rsi14", "atr14", "volume_ratio")

# Stand-in for an unknown spread; fails every spread check
UNKNOWN_SPREAD_BPS = 999.0


@dataclass
class SignalRulesConfig:
    """Thresholds of the confirmation rules."""

    rsi_long_low: float = 45.0
    rsi_long_high: float = 75.0
    rsi_short_low: float = 25.0
    rsi_short_high: float = 55.0
    min_volume_ratio: float = 1.2
    pullback_band: float = 0.02   # pullback_fit reaches 0 at 2% from ema21
    adx_full_strength: float = 50.0


class SignalRules:
    """
    Evaluates the confirmation rules on a snapshot.

    SINGLE RESPONSIBILITY:
    Says whether the conditions hold. Does not build the signal.
    """

    def __init__(self, config: SignalRulesConfig = None):
        self._config = config or SignalRulesConfig()

    @property
    def config(self) -> SignalRulesConfig:
        return self._config

    @staticmethod
    def missing_fields(snapshot: IndicatorSnapshot, price: Optional[float]) -> Tuple[str, ...]:
        """Names of the indicators the rules need but the snapshot lacks."""
        missing = tuple(name for name in REQUIRED_FIELDS if getattr(snapshot, name) is None)
        if price is None:
            missing = ("price",) + missing
        return missing

    # ════════════════════════════════════════════════════════════════
    #  RULE 1: TREND
    # ════════════════════════════════════════════════════════════════

    def check_trend(self, snapshot: IndicatorSnapshot, price: float) -> Optional[Direction]:
        """
        EMA stack alignment with price on the right side of ema21.

        Returns:
            LONG / SHORT when aligned, None otherwise
        """
        ema21, ema50, sma200 = snapshot.ema21, snapshot.ema50, snapshot.sma200
        if ema21 > ema50 > sma200 and price > ema21:
            return Direction.LONG
        if ema21 < ema50 < sma200 and price < ema21:
            return Direction.SHORT
        return None

    # ════════════════════════════════════════════════════════════════
    #  RULE 2: MOMENTUM
    # ════════════════════════════════════════════════════════════════

    def check_momentum(self, direction: Direction, rsi: float) -> bool:
        cfg = self._config
        if direction is Direction.LONG:
            return cfg.rsi_long_low < rsi < cfg.rsi_long_high
        return cfg.rsi_short_low < rsi < cfg.rsi_short_high

    # ════════════════════════════════════════════════════════════════
    #  RULE 3: VOLUME
    # ════════════════════════════════════════════════════════════════

    def check_volume(self, volume_ratio: float) -> bool:
        return volume_ratio > self._config.min_volume_ratio

    # ════════════════════════════════════════════════════════════════
    #  REGIME FIT FACTORS
    # ════════════════════════════════════════════════════════════════

    def trend_fit(self, snapshot: IndicatorSnapshot) -> float:
        """0.5 for an aligned stack, up to 1.0 with ADX strength (missing ADX = 0)."""
        adx = snapshot.adx or 0.0
        return 0.5 + 0.5 * clamp(adx / self._config.adx_full_strength)

    def pullback_fit(self, snapshot: IndicatorSnapshot, price: float) -> float:
        """1.0 at ema21, falling linearly to 0 at the pullback band."""
        if not snapshot.ema21:
            return 0.0
        distance = abs(price - snapshot.ema21) / snapshot.ema21
        return clamp(1.0 - distance / self._config.pullback_band)


class SignalAssembler:
    """
    Builds CandidateSignals from indicator snapshots.

    USAGE:
        assembler = SignalAssembler()
        candidate = assembler.assemble(snapshot, spread_bps=4.2, depth_usdt=25_000)
    """

    def __init__(
        self,
        rules: SignalRules = None,
        scoring: TrendMomentumScoring = None,
        confidence: CompleteAlgorithmConfidence = None,
        risk: RiskCalculator = None,
    ):
        self._rules = rules or SignalRules()
        self._scoring = scoring or TrendMomentumScoring()
        self._confidence = confidence or CompleteAlgorithmConfidence()
        self._risk = risk or RiskCalculator()

    @property
    def rules(self) -> SignalRules:
        return self._rules

    def assemble(
        self,
        snapshot: IndicatorSnapshot,
        price: Optional[float] = None,
        spread_bps: Optional[float] = None,
        depth_usdt: float = 0.0,
    ) -> Optional[CandidateSignal]:
        """
        Candidate for the snapshot, or None when a rule fails, the score is
        below the threshold, or an indicator is unavailable.

        Args:
            snapshot: Current indicator values
            price: Current price (defaults to the snapshot's last close)
            spread_bps: Spread from the ticker (None = unknown, scored as
                UNKNOWN_SPREAD_BPS)
            depth_usdt: Order-book depth from the market-data collaborator
                (0 = unknown)
        """
        price = price if price is not None else snapshot.price
        if self._rules.missing_fields(snapshot, price):
            return None

        direction = self._rules.check_trend(snapshot, price)
        if direction is None:
            return None
        if not self._rules.check_momentum(direction, snapshot.rsi14):
            return None
        if not self._rules.check_volume(snapshot.volume_ratio):
            return None

        score = self._scoring.score(snapshot, direction, price)
        if not self._scoring.accepts(score):
            return None

        levels = self._risk.calculate_levels(direction, price, snapshot.atr14)
        if not levels.is_valid:
            return None

        conditions = ["trend_aligned", "rsi_momentum", "volume_confirmed"]
        if CompleteAlgorithmConfidence.stochastic_confirms(snapshot, direction):
            conditions.append("stochastic_confirmed")
        if self._confidence.dmi_confirms(snapshot, direction):
            conditions.append("dmi_confirmed")

        return CandidateSignal(
            symbol=snapshot.symbol,
            timeframe=snapshot.timeframe,
            direction=direction,
            entry_price=price,
            stop_loss=levels.stop_loss,
            take_profit=levels.take_profit,
            raw_score=score,
            atr_pct=snapshot.atr14 / price * 100.0,
            trend_fit=self._rules.trend_fit(snapshot),
            pullback_fit=self._rules.pullback_fit(snapshot, price),
            spread_bps=spread_bps if spread_bps is not None else UNKNOWN_SPREAD_BPS,
            orderbook_depth_usdt=depth_usdt or 0.0,
            risk_reward=levels.rr,
            model_confidence=float(self._confidence.confidence(snapshot, direction)),
            conditions=tuple(conditions),
        )
