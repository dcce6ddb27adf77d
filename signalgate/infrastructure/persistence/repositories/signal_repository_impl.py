"""
Signal Repository Implementation.

ISignalRepository on SQLAlchemy async. Each call runs in its own
session from the DatabaseManager (committed on success).
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import desc, select

from signalgate.domain.entities.signal import GradedSignal
from signalgate.domain.repositories.signal_repository import ISignalRepository
from signalgate.infrastructure.persistence.database import DatabaseManager
from signalgate.infrastructure.persistence.mappers.signal_mapper import SignalMapper
from signalgate.infrastructure.persistence.models.signal import SignalModel
from signalgate.shared.logging.logger import get_logger

logger = get_logger("infrastructure.signal_repository")


class SignalRepositoryImpl(ISignalRepository):

    def __init__(self, db: DatabaseManager):
        self._db = db

    async def save(self, signal: GradedSignal) -> str:
        async with self._db.session() as session:
            session.add(SignalMapper.to_model(signal))
        logger.debug("Signal saved: uuid=%s symbol=%s", signal.id, signal.symbol)
        return signal.id

    async def find_by_id(self, signal_id: str) -> Optional[GradedSignal]:
        async with self._db.session() as session:
            result = await session.execute(
                select(SignalModel).where(SignalModel.uuid == signal_id)
            )
            model = result.scalar_one_or_none()
        return SignalMapper.to_entity(model) if model is not None else None

    async def find_recent(
        self,
        limit: int = 50,
        symbol: Optional[str] = None,
    ) -> List[GradedSignal]:
        query = select(SignalModel)
        if symbol:
            query = query.where(SignalModel.symbol == symbol)
        query = query.order_by(desc(SignalModel.created_at_ms), desc(SignalModel.id)).limit(limit)

        async with self._db.session() as session:
            models = (await session.execute(query)).scalars().all()
        return [SignalMapper.to_entity(m) for m in models]
