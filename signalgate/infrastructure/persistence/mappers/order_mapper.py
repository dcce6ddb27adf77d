"""Order (domain) ↔ OrderModel (ORM row of the order log)."""

from __future__ import annotations

from decimal import Decimal

from signalgate.domain.entities.order import Order, OrderSide, OrderStatus
from signalgate.infrastructure.persistence.models.order import OrderModel


class OrderMapper:

    @staticmethod
    def to_model(order: Order) -> OrderModel:
        return OrderModel(
            order_id=order.id,
            signal_id=order.signal_id,
            symbol=order.symbol,
            side=order.side.value,
            quantity=Decimal(str(order.quantity)),
            order_type=order.order_type,
            price=Decimal(str(order.price)) if order.price is not None else None,
            status=order.status.value,
            attempt=order.attempt,
            exchange_order_id=order.exchange_order_id,
            category=order.category,
            last_error=order.last_error,
            paper=order.paper,
            created_at_ms=int(order.created_at * 1000),
        )

    @staticmethod
    def to_entity(model: OrderModel) -> Order:
        return Order(
            symbol=model.symbol,
            side=OrderSide(model.side),
            quantity=float(model.quantity),
            order_type=model.order_type,
            status=OrderStatus(model.status),
            exchange_order_id=model.exchange_order_id,
            attempt=model.attempt,
            last_error=model.last_error,
            category=model.category,
            price=float(model.price) if model.price is not None else None,
            signal_id=model.signal_id,
            paper=bool(model.paper),
            id=model.order_id,
            created_at=model.created_at_ms / 1000.0,
        )
