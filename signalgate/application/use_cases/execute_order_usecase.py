"""
Execute Order Use Case.

Submits an order for an auto-tradeable graded signal, appends every
order record to the order log and publishes the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from signalgate.application.ports.event_publisher import IEventPublisher
from signalgate.application.ports.order_gateway import IOrderGateway, OrderResult
from signalgate.domain.entities.order import OrderSide
from signalgate.domain.entities.signal import Direction, GradedSignal
from signalgate.domain.events.domain_events import OrderFailed, OrderFilled
from signalgate.domain.repositories.order_repository import IOrderRepository
from signalgate.shared.logging.logger import get_logger

logger = get_logger("usecase.execute_order")


@dataclass
class ExecuteOrderResult:
    executed: bool = False
    result: Optional[OrderResult] = None
    skipped_reason: Optional[str] = None


class ExecuteOrderUseCase:
    """
    Use case: execute an auto-tradeable signal.

    FLOW:
    1. Refuse signals that are not auto-tradeable
    2. Best-effort leverage setup
    3. place_order through the gateway (paper or live)
    4. Append the order history to the log
    5. Publish OrderFilled / OrderFailed
    """

    def __init__(
        self,
        gateway: IOrderGateway,
        order_repository: IOrderRepository,
        event_publisher: IEventPublisher,
        usd_amount: float = 10.0,
        leverage: int = 1,
    ):
        self._gateway = gateway
        self._order_repo = order_repository
        self._event_publisher = event_publisher
        self._usd_amount = usd_amount
        self._leverage = leverage

    async def execute(
        self,
        signal: GradedSignal,
        usd_amount: Optional[float] = None,
    ) -> ExecuteOrderResult:
        if not signal.auto_tradeable:
            return ExecuteOrderResult(skipped_reason="not_auto_tradeable")

        if self._leverage > 1:
            applied = await self._gateway.ensure_leverage(signal.symbol, self._leverage)
            if not applied:
                logger.warning(
                    "Leverage %sx not applied on %s, continuing", self._leverage, signal.symbol,
                )

        side = OrderSide.BUY if signal.direction is Direction.LONG else OrderSide.SELL
        result = await self._gateway.place_order(
            symbol=signal.symbol,
            side=side,
            usd_amount=usd_amount or self._usd_amount,
            signal_id=signal.id,
            price_hint=signal.candidate.entry_price,
        )

        for record in result.history:
            await self._order_repo.append(record)

        if result.ok:
            order = result.order
            logger.info(
                f"Order {order.id} FILLED {side.value} {order.quantity} {signal.symbol} "
                f"@ {order.price} ({'paper' if order.paper else 'live'})"
            )
            await self._event_publisher.publish(
                OrderFilled(
                    order_id=order.id,
                    signal_id=signal.id,
                    symbol=signal.symbol,
                    side=side.value,
                    quantity=order.quantity,
                    price=order.price or 0.0,
                    exchange_order_id=order.exchange_order_id or "",
                    paper=order.paper,
                )
            )
        else:
            logger.error(
                "Order for %s ended %s after %d attempt(s): %s",
                signal.symbol, result.outcome.value, result.attempts, result.message,
            )
            await self._event_publisher.publish(
                OrderFailed(
                    order_id=result.order.id if result.order else "",
                    signal_id=signal.id,
                    symbol=signal.symbol,
                    outcome=result.outcome.value,
                    category=result.category.value if result.category else "",
                    message=result.message or "",
                    attempts=result.attempts,
                )
            )

        return ExecuteOrderResult(executed=True, result=result)
