"""
SignalGate – Signal Mapper
==========================
GradedSignal (domain) ↔ SignalModel (ORM).

- The domain does not know SQLAlchemy
- The ORM model holds no business logic
- The mapper translates between the two
"""

from __future__ import annotations

from decimal import Decimal

from signalgate.domain.entities.signal import CandidateSignal, Direction, Grade, GradedSignal
from signalgate.infrastructure.persistence.models.signal import SignalModel


class SignalMapper:
    """
    Bidirectional GradedSignal ↔ SignalModel mapper.

    USAGE:
        model = SignalMapper.to_model(signal)
        entity = SignalMapper.to_entity(model)
    """

    @staticmethod
    def to_model(signal: GradedSignal) -> SignalModel:
        c = signal.candidate
        return SignalModel(
            uuid=c.id,
            symbol=c.symbol,
            timeframe=c.timeframe,
            direction=c.direction.value,
            entry_price=Decimal(str(round(c.entry_price, 8))),
            stop_loss=Decimal(str(round(c.stop_loss, 8))),
            take_profit=Decimal(str(round(c.take_profit, 8))),
            risk_reward=c.risk_reward,
            raw_score=c.raw_score,
            model_confidence=c.model_confidence,
            atr_pct=c.atr_pct,
            trend_fit=c.trend_fit,
            pullback_fit=c.pullback_fit,
            spread_bps=c.spread_bps,
            orderbook_depth_usdt=c.orderbook_depth_usdt,
            conditions=list(c.conditions),
            execution_score=signal.execution_score,
            grade=signal.grade.value,
            auto_tradeable=signal.auto_tradeable,
            created_at_ms=int(c.timestamp * 1000),
        )

    @staticmethod
    def to_entity(model: SignalModel) -> GradedSignal:
        candidate = CandidateSignal(
            symbol=model.symbol,
            timeframe=model.timeframe,
            direction=Direction(model.direction),
            entry_price=float(model.entry_price),
            stop_loss=float(model.stop_loss),
            take_profit=float(model.take_profit),
            raw_score=model.raw_score,
            atr_pct=model.atr_pct,
            trend_fit=model.trend_fit,
            pullback_fit=model.pullback_fit,
            spread_bps=model.spread_bps,
            orderbook_depth_usdt=model.orderbook_depth_usdt,
            risk_reward=model.risk_reward,
            model_confidence=model.model_confidence or 0.0,
            conditions=tuple(model.conditions or ()),
            id=model.uuid,
            timestamp=model.created_at_ms / 1000.0,
        )
        return candidate.graded(
            execution_score=model.execution_score,
            grade=Grade(model.grade),
            auto_tradeable=bool(model.auto_tradeable),
        )
