"""Alert Log Repository Implementation."""

from __future__ import annotations

from typing import List

from sqlalchemy import desc, select

from signalgate.domain.entities.alert import AlertEvent
from signalgate.domain.repositories.alert_repository import IAlertRepository
from signalgate.infrastructure.persistence.database import DatabaseManager
from signalgate.infrastructure.persistence.mappers.alert_mapper import AlertMapper
from signalgate.infrastructure.persistence.models.alert import AlertLogModel


class AlertRepositoryImpl(IAlertRepository):

    def __init__(self, db: DatabaseManager):
        self._db = db

    async def save(self, alert: AlertEvent) -> None:
        async with self._db.session() as session:
            session.add(AlertMapper.to_model(alert))

    async def exists_recent(self, hash_key: str, since: float) -> bool:
        async with self._db.session() as session:
            result = await session.execute(
                select(AlertLogModel.id)
                .where(
                    AlertLogModel.hash_key == hash_key,
                    AlertLogModel.created_at_ms >= int(since * 1000),
                )
                .limit(1)
            )
            return result.scalar_one_or_none() is not None

    async def find_recent(self, limit: int = 50) -> List[AlertEvent]:
        async with self._db.session() as session:
            result = await session.execute(
                select(AlertLogModel).order_by(desc(AlertLogModel.id)).limit(limit)
            )
            models = result.scalars().all()
        return [AlertMapper.to_entity(m) for m in models]
