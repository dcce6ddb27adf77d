"""
SignalGate – Domain Entity: Signal
==================================
Candidate and graded trading signals.

DESIGN DECISIONS:
- frozen=True → a signal is never altered after it is emitted.
- GradedSignal is built as a NEW record from the candidate
  (``CandidateSignal.graded``); grading never mutates the candidate.
- conditions is a tuple → auditable record of which rules fired.

FIELDS (CandidateSignal):
- entry_price / stop_loss / take_profit: ATR based levels
- raw_score:        TrendMomentumScoring result [0-100]
- model_confidence: CompleteAlgorithmConfidence result [0-100]
- atr_pct:          ATR as % of price
- trend_fit / pullback_fit: regime fit factors in [0,1]
- spread_bps / orderbook_depth_usdt: execution context from the ticker
  (depth 0 = unknown)
- risk_reward:      reward / risk of the levels
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum


class Direction(str, Enum):
    """Trade direction of a signal."""
    LONG = "LONG"
    SHORT = "SHORT"


class Grade(str, Enum):
    """Letter grade derived from the execution score."""
    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"


@dataclass(frozen=True, slots=True)
class CandidateSignal:
    """Signal emitted by the assembler, before gating and grading."""

    symbol: str
    timeframe: str
    direction: Direction
    entry_price: float
    stop_loss: float
    take_profit: float
    raw_score: float
    atr_pct: float
    trend_fit: float
    pullback_fit: float
    spread_bps: float
    orderbook_depth_usdt: float
    risk_reward: float
    model_confidence: float = 0.0
    conditions: tuple = ()
    id: str = field(default_factory=lambda: CandidateSignal.generate_id())
    timestamp: float = field(default_factory=time.time)

    @property
    def confidence(self) -> float:
        """Confidence fed to the execution scorer (0-100 scale)."""
        return self.model_confidence or self.raw_score

    def graded(
        self,
        execution_score: float,
        grade: Grade,
        auto_tradeable: bool,
    ) -> "GradedSignal":
        """Build the graded record for this candidate."""
        return GradedSignal(
            candidate=self,
            execution_score=execution_score,
            grade=grade,
            auto_tradeable=auto_tradeable,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "timeframe": self.timeframe,
            "direction": self.direction.value,
            "entry_price": self.entry_price,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "raw_score": round(self.raw_score, 2),
            "model_confidence": round(self.model_confidence, 2),
            "atr_pct": round(self.atr_pct, 4),
            "trend_fit": round(self.trend_fit, 4),
            "pullback_fit": round(self.pullback_fit, 4),
            "spread_bps": round(self.spread_bps, 2),
            "orderbook_depth_usdt": round(self.orderbook_depth_usdt, 2),
            "risk_reward": round(self.risk_reward, 2),
            "conditions": list(self.conditions),
            "timestamp": self.timestamp,
        }

    @staticmethod
    def generate_id() -> str:
        """Compact unique id (12 hex chars of a UUID4)."""
        return uuid.uuid4().hex[:12]


@dataclass(frozen=True, slots=True)
class GradedSignal:
    """Candidate plus execution score, grade and auto-trade flag."""

    candidate: CandidateSignal
    execution_score: float
    grade: Grade
    auto_tradeable: bool

    # Convenience passthroughs used by ranking, persistence and the API
    @property
    def id(self) -> str:
        return self.candidate.id

    @property
    def symbol(self) -> str:
        return self.candidate.symbol

    @property
    def timeframe(self) -> str:
        return self.candidate.timeframe

    @property
    def direction(self) -> Direction:
        return self.candidate.direction

    @property
    def risk_reward(self) -> float:
        return self.candidate.risk_reward

    @property
    def spread_bps(self) -> float:
        return self.candidate.spread_bps

    @property
    def timestamp(self) -> float:
        return self.candidate.timestamp

    def to_dict(self) -> dict:
        data = self.candidate.to_dict()
        data.update({
            "execution_score": round(self.execution_score, 4),
            "grade": self.grade.value,
            "auto_tradeable": self.auto_tradeable,
        })
        return data
