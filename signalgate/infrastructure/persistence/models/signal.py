"""
SignalGate – Signal ORM Model
=============================
Table ``signals``: every graded signal accepted by the gate.

DESIGN DECISIONS:
- uuid CHAR(12): short id generated by the domain (CandidateSignal.id).
- DECIMAL(20,8) for prices.
- JSON for conditions: the rules that fired, for auditing.
- created_at_ms: epoch ms of the candidate.

Mapping to/from GradedSignal lives in mappers/signal_mapper.py.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import JSON, BigInteger, Boolean, Float, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from signalgate.infrastructure.persistence.database import Base, PrimaryKeyType


class SignalModel(Base):
    __tablename__ = "signals"

    # ─── Primary Key ──────────────────────────────────────────────────
    id: Mapped[int] = mapped_column(PrimaryKeyType, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(
        String(12), unique=True, nullable=False,
        comment="Short id generated by the domain",
    )

    # ─── Identity ─────────────────────────────────────────────────────
    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    timeframe: Mapped[str] = mapped_column(String(8), nullable=False)
    direction: Mapped[str] = mapped_column(String(8), nullable=False, comment="LONG | SHORT")

    # ─── Levels ───────────────────────────────────────────────────────
    entry_price: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    stop_loss: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    take_profit: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    risk_reward: Mapped[float] = mapped_column(Float, nullable=False)

    # ─── Scores / execution context ───────────────────────────────────
    raw_score: Mapped[float] = mapped_column(Float, nullable=False)
    model_confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    atr_pct: Mapped[float] = mapped_column(Float, nullable=False)
    trend_fit: Mapped[float] = mapped_column(Float, nullable=False)
    pullback_fit: Mapped[float] = mapped_column(Float, nullable=False)
    spread_bps: Mapped[float] = mapped_column(Float, nullable=False)
    orderbook_depth_usdt: Mapped[float] = mapped_column(Float, nullable=False)
    conditions: Mapped[list] = mapped_column(JSON, nullable=False)

    # ─── Grade ────────────────────────────────────────────────────────
    execution_score: Mapped[float] = mapped_column(Float, nullable=False)
    grade: Mapped[str] = mapped_column(String(2), nullable=False)
    auto_tradeable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        Index("idx_signals_symbol_time", "symbol", "created_at_ms"),
        Index("idx_signals_time", "created_at_ms"),
    )

    def __repr__(self) -> str:
        return (
            f"<Signal(id={self.id}, uuid='{self.uuid}', "
            f"{self.direction} {self.symbol} {self.timeframe} grade={self.grade})>"
        )
