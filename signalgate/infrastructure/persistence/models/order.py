"""
SignalGate – Order Log ORM Model
================================
Table ``order_log``: append-only. One row per order state transition;
rows are never updated, the history of an order is its rows in
insertion order.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from signalgate.infrastructure.persistence.database import Base, PrimaryKeyType


class OrderModel(Base):
    __tablename__ = "order_log"

    id: Mapped[int] = mapped_column(PrimaryKeyType, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(String(12), nullable=False)
    signal_id: Mapped[Optional[str]] = mapped_column(String(12), default=None)

    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    side: Mapped[str] = mapped_column(String(4), nullable=False, comment="Buy | Sell")
    quantity: Mapped[Decimal] = mapped_column(Numeric(28, 10), nullable=False)
    order_type: Mapped[str] = mapped_column(String(8), nullable=False, default="Market")
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 8), default=None)

    status: Mapped[str] = mapped_column(String(10), nullable=False)
    attempt: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    exchange_order_id: Mapped[Optional[str]] = mapped_column(String(64), default=None)
    category: Mapped[Optional[str]] = mapped_column(String(32), default=None)
    last_error: Mapped[Optional[str]] = mapped_column(Text, default=None)
    paper: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        Index("idx_order_log_order", "order_id", "id"),
        Index("idx_order_log_time", "created_at_ms"),
    )

    def __repr__(self) -> str:
        return f"<OrderLog(id={self.id}, order_id='{self.order_id}', status={self.status})>"
