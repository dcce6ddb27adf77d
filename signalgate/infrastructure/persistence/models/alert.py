"""
SignalGate – Alert Log ORM Model
================================
Table ``alert_log``: every dispatched alert with its per-channel outcome.
``hash_key`` + ``created_at_ms`` back the dedupe lookup after a restart.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import JSON, BigInteger, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from signalgate.infrastructure.persistence.database import Base, PrimaryKeyType


class AlertLogModel(Base):
    __tablename__ = "alert_log"

    id: Mapped[int] = mapped_column(PrimaryKeyType, primary_key=True, autoincrement=True)
    event: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[str] = mapped_column(String(10), nullable=False)
    # "metadata" is reserved on declarative classes
    meta: Mapped[dict] = mapped_column("metadata", JSON, nullable=False)
    hash_key: Mapped[str] = mapped_column(String(64), nullable=False)
    delivered_to: Mapped[dict] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    error_msg: Mapped[Optional[str]] = mapped_column(Text, default=None)
    created_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        Index("idx_alert_log_hash_time", "hash_key", "created_at_ms"),
    )

    def __repr__(self) -> str:
        return f"<AlertLog(id={self.id}, event='{self.event}', status={self.status})>"
