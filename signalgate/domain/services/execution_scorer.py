"""
SignalGate – Domain Service: Execution Scorer (stage 2)
=======================================================
Execution-realistic score, grade and ranking of gated candidates.

FORMULA:
    conf_norm    = clamp(conf / 100 if conf > 1 else conf)
    rr_norm      = clamp(risk_reward / 3)
    spread_norm  = clamp(spread_bps / 20)
    liq_norm     = clamp(depth_usdt / 2000)
    regime_fit   = 0.2 × clamp(trend_fit) + 0.2 × clamp(pullback_fit)
    exec_penalty = 0.35 × spread_norm + 0.25 × (1 - liq_norm)
    score        = clamp(0.55 × conf_norm + 0.20 × rr_norm
                         + 0.15 × regime_fit - 0.10 × exec_penalty)

GRADE (pure step function of the score):
    ≥ 0.90 A+ | ≥ 0.80 A | ≥ 0.65 B | else C

AUTO-TRADE FLOOR (hard-coded, independent of GateOptions):
    grade ∈ {A+, A} and score ≥ 0.8 and RR ≥ 2.0 and spread ≤ 15 bps
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable, List, Mapping, Optional

from signalgate.domain.entities.signal import CandidateSignal, Grade, GradedSignal
from signalgate.domain.services.quality_gate import QualityGate
from signalgate.domain.services.signal_scoring import clamp


AUTO_TRADE_GRADES = frozenset({Grade.A_PLUS, Grade.A})
AUTO_TRADE_MIN_SCORE = 0.8
AUTO_TRADE_MIN_RR = 2.0
AUTO_TRADE_MAX_SPREAD_BPS = 15.0

SCORE_TIE_EPSILON = 1e-6
UNKNOWN_DEPTH_USDT = 500.0


@dataclass(frozen=True)
class ExecutionQuality:
    """Estimated fill characteristics of a signal."""

    estimated_slippage_pct: float
    fill_odds: float
    quality: str  # Excellent | Good | Fair | Poor

    def to_dict(self) -> dict:
        return {
            "estimated_slippage_pct": round(self.estimated_slippage_pct, 4),
            "fill_odds": round(self.fill_odds, 4),
            "quality": self.quality,
        }


class ExecutionScorer:
    """Stage 2 of the Gate & Score engine."""

    def __init__(self, gate: QualityGate = None):
        self._gate = gate or QualityGate()

    @property
    def gate(self) -> QualityGate:
        return self._gate

    # ════════════════════════════════════════════════════════════════
    #  SCORE / GRADE
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def execution_score(signal: CandidateSignal) -> float:
        conf = signal.confidence
        conf_norm = clamp(conf / 100.0 if conf > 1 else conf)
        rr_norm = clamp(signal.risk_reward / 3.0)
        spread_norm = clamp(signal.spread_bps / 20.0)
        liq_norm = clamp(signal.orderbook_depth_usdt / 2000.0)
        regime_fit = 0.2 * clamp(signal.trend_fit) + 0.2 * clamp(signal.pullback_fit)
        exec_penalty = 0.35 * spread_norm + 0.25 * (1.0 - liq_norm)

        return clamp(
            0.55 * conf_norm
            + 0.20 * rr_norm
            + 0.15 * regime_fit
            - 0.10 * exec_penalty
        )

    @staticmethod
    def grade(score: float) -> Grade:
        if score >= 0.90:
            return Grade.A_PLUS
        if score >= 0.80:
            return Grade.A
        if score >= 0.65:
            return Grade.B
        return Grade.C

    @staticmethod
    def is_auto_tradeable(
        grade: Grade,
        score: float,
        risk_reward: float,
        spread_bps: float,
    ) -> bool:
        return (
            grade in AUTO_TRADE_GRADES
            and score >= AUTO_TRADE_MIN_SCORE
            and risk_reward >= AUTO_TRADE_MIN_RR
            and spread_bps <= AUTO_TRADE_MAX_SPREAD_BPS
        )

    def grade_signal(self, signal: CandidateSignal) -> GradedSignal:
        """New GradedSignal for the candidate (the candidate is not modified)."""
        score = self.execution_score(signal)
        grade = self.grade(score)
        return signal.graded(
            execution_score=score,
            grade=grade,
            auto_tradeable=self.is_auto_tradeable(
                grade, score, signal.risk_reward, signal.spread_bps,
            ),
        )

    # ════════════════════════════════════════════════════════════════
    #  RANKING
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def rank(signals: Iterable[GradedSignal]) -> List[GradedSignal]:
        """
        Score descending; scores within 1e-6 are ordered by timestamp
        descending (newest first).
        """
        return sorted(signals, key=cmp_to_key(_compare_ranked))

    def filter_and_rank(
        self,
        candidates: Iterable[CandidateSignal],
        win_rates: Optional[Mapping[str, float]] = None,
    ) -> List[GradedSignal]:
        """gate → grade → rank."""
        graded = [
            self.grade_signal(c)
            for c in candidates
            if self._gate.passes(c, win_rates)
        ]
        return self.rank(graded)

    # ════════════════════════════════════════════════════════════════
    #  EXECUTION QUALITY
    # ════════════════════════════════════════════════════════════════

    @staticmethod
    def estimate_execution_quality(signal: CandidateSignal) -> ExecutionQuality:
        """
        Slippage and fill odds from spread and depth.

        slippage  = spread/10000 × clamp(1000 / depth, 0.5, 2)
        fill_odds = clamp((depth / 2000) × (1 - spread / 50), 0.3, 0.95)
        Unknown depth (0) is estimated at 500 USDT.
        """
        spread = signal.spread_bps
        depth = signal.orderbook_depth_usdt or UNKNOWN_DEPTH_USDT

        slippage = spread / 10_000 * clamp(1000.0 / depth, 0.5, 2.0)
        fill_odds = clamp((depth / 2000.0) * (1.0 - spread / 50.0), 0.3, 0.95)

        if slippage <= 0.0005 and fill_odds >= 0.9:
            quality = "Excellent"
        elif slippage <= 0.001 and fill_odds >= 0.8:
            quality = "Good"
        elif slippage <= 0.002 and fill_odds >= 0.6:
            quality = "Fair"
        else:
            quality = "Poor"

        return ExecutionQuality(
            estimated_slippage_pct=slippage * 100.0,
            fill_odds=fill_odds,
            quality=quality,
        )


def _compare_ranked(a: GradedSignal, b: GradedSignal) -> int:
    diff = b.execution_score - a.execution_score
    if abs(diff) > SCORE_TIE_EPSILON:
        return 1 if diff > 0 else -1
    if a.timestamp == b.timestamp:
        return 0
    return 1 if b.timestamp > a.timestamp else -1
