"""
Order Log Repository Implementation.

Append-only: ``append`` inserts, nothing updates or deletes.
"""

from __future__ import annotations

from typing import List

from sqlalchemy import desc, select

from signalgate.domain.entities.order import Order
from signalgate.domain.repositories.order_repository import IOrderRepository
from signalgate.infrastructure.persistence.database import DatabaseManager
from signalgate.infrastructure.persistence.mappers.order_mapper import OrderMapper
from signalgate.infrastructure.persistence.models.order import OrderModel


class OrderRepositoryImpl(IOrderRepository):

    def __init__(self, db: DatabaseManager):
        self._db = db

    async def append(self, order: Order) -> None:
        async with self._db.session() as session:
            session.add(OrderMapper.to_model(order))

    async def history(self, order_id: str) -> List[Order]:
        async with self._db.session() as session:
            result = await session.execute(
                select(OrderModel)
                .where(OrderModel.order_id == order_id)
                .order_by(OrderModel.id)
            )
            models = result.scalars().all()
        return [OrderMapper.to_entity(m) for m in models]

    async def find_recent(self, limit: int = 50) -> List[Order]:
        async with self._db.session() as session:
            result = await session.execute(
                select(OrderModel).order_by(desc(OrderModel.id)).limit(limit)
            )
            models = result.scalars().all()
        return [OrderMapper.to_entity(m) for m in models]
