"""
Bybit V5 Order Gateway.

Implements IOrderGateway on the signed V5 REST API
(``/v5/order/create``, ``/v5/order/cancel``, ``/v5/position/set-leverage``).

ORDER LIFECYCLE (one record appended per transition):
    NEW ──sign──▶ SIGNED ──POST──▶ SENT ──retCode 0──▶ FILLED
     │                │              ├──retCode ≠ 0──▶ REJECTED (category)
     │                │              └──transport────▶ ERROR
     │                └──────────────────────────────▶ ERROR
     └──invalid symbol / qty / no price──────────────▶ REJECTED | ERROR

RETRY:
Transport failures (timeout, connection, HTTP 5xx) and local signing
failures are retried up to ``max_attempts`` with ``backoff × attempt``
sleeps. Every retry starts a fresh NEW record with the same order id and
an incremented ``attempt``. Exchange verdicts (nonzero retCode) are
never retried.

PAPER MODE:
Active unless live trading is enabled AND both credentials are set.
The body is still built and signed locally but the exchange is never
contacted: the order fills at the caller's price hint, else the last
known price, else ``paper_fallback_price``, with a ``PAPER-<hex>`` id.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import httpx

from signalgate.application.ports.market_data_provider import IMarketDataProvider
from signalgate.application.ports.order_gateway import (
    ErrorCategory,
    IOrderGateway,
    OrderOutcome,
    OrderResult,
)
from signalgate.domain.entities.order import Order, OrderSide, OrderStatus
from signalgate.infrastructure.external.exceptions import (
    ExchangeError,
    SigningError,
    TransportError,
)
from signalgate.infrastructure.external.rate_limiter import RateLimiter
from signalgate.infrastructure.external.signing import build_headers, compact_json
from signalgate.shared.logging.logger import get_logger

logger = get_logger("bybit_gateway")

LEVERAGE_NOT_MODIFIED = 110043


class BybitGateway(IOrderGateway):
    """
    IOrderGateway over Bybit V5.

    USAGE:
        gateway = BybitGateway(base_url, api_key, api_secret, live_trading=True)
        result = await gateway.place_order("BTCUSDT", OrderSide.BUY, 10.0)
        if result.ok: ...
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        api_secret: str = "",
        live_trading: bool = False,
        category: str = "linear",
        recv_window: int = 5000,
        quote_assets: Sequence[str] = ("USDT",),
        qty_precision: int = 3,
        paper_fallback_price: float = 100.0,
        max_attempts: int = 3,
        backoff_seconds: float = 0.5,
        rate_limiter: Optional[RateLimiter] = None,
        market_data: Optional[IMarketDataProvider] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._api_secret = api_secret
        self._live_trading = live_trading
        self._category = category
        self._recv_window = recv_window
        self._quote_assets = tuple(q.upper() for q in quote_assets)
        self._qty_precision = qty_precision
        self._paper_fallback_price = paper_fallback_price
        self._max_attempts = max(1, max_attempts)
        self._backoff = backoff_seconds
        self._rate_limiter = rate_limiter or RateLimiter()
        self._market_data = market_data
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._sleep = sleep
        self._last_prices: Dict[str, float] = {}

        if self.paper_mode:
            logger.info("BybitGateway in PAPER mode (no order leaves the process)")
        else:
            logger.warning("BybitGateway in LIVE mode on %s", self._base_url)

    @property
    def paper_mode(self) -> bool:
        return not (self._live_trading and self._api_key and self._api_secret)

    @property
    def _limiter_key(self) -> str:
        return self._api_key or "paper"

    # ════════════════════════════════════════════════════════════════
    #  Price / leverage
    # ════════════════════════════════════════════════════════════════

    async def get_price(self, symbol: str) -> Optional[float]:
        price: Optional[float] = None
        if self._market_data is not None:
            price = await self._market_data.get_price(symbol)
        else:
            try:
                response = await self._client.get(
                    f"{self._base_url}/v5/market/tickers",
                    params={"category": self._category, "symbol": symbol},
                )
                items = response.json().get("result", {}).get("list") or []
                if items:
                    price = float(items[0]["lastPrice"])
            except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning("Price lookup failed for %s: %s", symbol, e)

        if price:
            self._last_prices[symbol] = price
        return price

    async def ensure_leverage(self, symbol: str, leverage: int) -> bool:
        if self.paper_mode:
            return True
        body = {
            "category": self._category,
            "symbol": symbol,
            "buyLeverage": str(leverage),
            "sellLeverage": str(leverage),
        }
        if not self._rate_limiter.check_and_record(self._limiter_key):
            logger.warning("Leverage setup for %s throttled", symbol)
            return False
        try:
            await self._post("/v5/position/set-leverage", body)
        except ExchangeError as e:
            if e.ret_code == LEVERAGE_NOT_MODIFIED:
                return True
            logger.warning("Leverage %sx not set on %s: %s", leverage, symbol, e)
            return False
        except (TransportError, SigningError) as e:
            logger.warning("Leverage %sx not set on %s: %s", leverage, symbol, e)
            return False
        logger.info("Leverage set to %sx on %s", leverage, symbol)
        return True

    # ════════════════════════════════════════════════════════════════
    #  Orders
    # ════════════════════════════════════════════════════════════════

    async def place_order(
        self,
        symbol: str,
        side: OrderSide,
        usd_amount: float,
        order_type: str = "Market",
        signal_id: Optional[str] = None,
        price_hint: Optional[float] = None,
    ) -> OrderResult:
        paper = self.paper_mode
        order = Order(
            symbol=symbol,
            side=OrderSide(side),
            quantity=0.0,
            order_type=order_type,
            signal_id=signal_id,
            paper=paper,
        )
        history: List[Order] = [order]

        if not paper and not symbol.upper().endswith(self._quote_assets):
            return self._fail(
                order, history, OrderStatus.REJECTED, OrderOutcome.REJECTED,
                ErrorCategory.UNSUPPORTED_SYMBOL,
                f"{symbol} is not quoted in {', '.join(self._quote_assets)}",
                attempts=0,
            )

        if paper:
            price = price_hint or self._last_prices.get(symbol) or self._paper_fallback_price
        else:
            price = await self.get_price(symbol)
        if not price:
            return self._fail(
                order, history, OrderStatus.ERROR, OrderOutcome.ERROR,
                ErrorCategory.NETWORK, f"no price available for {symbol}", attempts=0,
            )

        quantity = round(usd_amount / price, self._qty_precision)
        if quantity <= 0:
            return self._fail(
                order, history, OrderStatus.REJECTED, OrderOutcome.REJECTED,
                ErrorCategory.INVALID_QUANTITY,
                f"quantity {quantity} for {usd_amount} USD at {price}", attempts=0,
            )
        order = replace(order, quantity=quantity, price=price)
        history[0] = order

        body = self._order_body(order)
        if paper:
            return self._paper_fill(order, body, history)
        return await self._submit(order, body, history)

    async def cancel_order(self, symbol: str, order_id: str) -> OrderResult:
        if self.paper_mode:
            return OrderResult(outcome=OrderOutcome.CANCELLED, attempts=0, message="paper")
        if not self._rate_limiter.check_and_record(self._limiter_key):
            return OrderResult(
                outcome=OrderOutcome.THROTTLED,
                category=ErrorCategory.RATE_LIMITED,
                message="rate limit exceeded",
            )
        body = {"category": self._category, "symbol": symbol, "orderId": order_id}
        try:
            await self._post("/v5/order/cancel", body)
        except ExchangeError as e:
            return OrderResult(
                outcome=OrderOutcome.REJECTED, attempts=1, category=e.category, message=str(e),
            )
        except (TransportError, SigningError) as e:
            return OrderResult(
                outcome=OrderOutcome.ERROR, attempts=1, category=e.category, message=str(e),
            )
        logger.info("Order %s on %s cancelled", order_id, symbol)
        return OrderResult(outcome=OrderOutcome.CANCELLED, attempts=1)

    # ════════════════════════════════════════════════════════════════
    #  Internals
    # ════════════════════════════════════════════════════════════════

    def _order_body(self, order: Order) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "category": self._category,
            "symbol": order.symbol,
            "side": order.side.value,
            "orderType": order.order_type,
            "qty": f"{order.quantity:.{self._qty_precision}f}",
            "orderLinkId": order.id,
        }
        if order.order_type == "Limit":
            body["price"] = str(order.price)
            body["timeInForce"] = "GTC"
        else:
            body["timeInForce"] = "IOC"
        return body

    def _paper_fill(self, order: Order, body: Dict[str, Any], history: List[Order]) -> OrderResult:
        self._sign(compact_json(body))
        order = order.transition(OrderStatus.SIGNED)
        history.append(order)
        order = order.transition(OrderStatus.SENT)
        history.append(order)
        order = order.transition(
            OrderStatus.FILLED, exchange_order_id=f"PAPER-{uuid.uuid4().hex[:16]}",
        )
        history.append(order)
        logger.info(
            "[PAPER] %s %s %s @ %s → %s",
            order.side.value, order.quantity, order.symbol, order.price, order.exchange_order_id,
        )
        return OrderResult(outcome=OrderOutcome.FILLED, order=order, attempts=1, history=history)

    async def _submit(self, order: Order, body: Dict[str, Any], history: List[Order]) -> OrderResult:
        payload = compact_json(body)
        current = order

        for attempt in range(1, self._max_attempts + 1):
            if attempt > 1:
                current = replace(
                    order, attempt=attempt, status=OrderStatus.NEW, created_at=time.time(),
                )
                history.append(current)

            if not self._rate_limiter.check_and_record(self._limiter_key):
                return self._fail(
                    current, history, OrderStatus.ERROR, OrderOutcome.THROTTLED,
                    ErrorCategory.RATE_LIMITED, "rate limit exceeded", attempts=attempt - 1,
                )

            try:
                headers = self._sign(payload)
            except SigningError as e:
                failed = self._record_error(current, history, e.category, str(e))
                if await self._backoff_or_give_up(attempt, failed, e):
                    continue
                return self._result(OrderOutcome.ERROR, failed, attempt, e.category, str(e), history)

            current = current.transition(OrderStatus.SIGNED)
            history.append(current)
            current = current.transition(OrderStatus.SENT)
            history.append(current)

            try:
                result = await self._send("/v5/order/create", payload, headers)
            except TransportError as e:
                failed = self._record_error(current, history, e.category, str(e))
                if await self._backoff_or_give_up(attempt, failed, e):
                    continue
                return self._result(OrderOutcome.ERROR, failed, attempt, e.category, str(e), history)
            except ExchangeError as e:
                rejected = current.transition(
                    OrderStatus.REJECTED, category=e.category.value, last_error=str(e),
                )
                history.append(rejected)
                logger.error("Order %s rejected: %s", order.id, e)
                return self._result(
                    OrderOutcome.REJECTED, rejected, attempt, e.category, str(e), history,
                )

            filled = current.transition(
                OrderStatus.FILLED, exchange_order_id=str(result.get("orderId", "")),
            )
            history.append(filled)
            return OrderResult(
                outcome=OrderOutcome.FILLED, order=filled, attempts=attempt, history=history,
            )

        # max_attempts >= 1, the loop always returns
        raise RuntimeError("unreachable")

    async def _backoff_or_give_up(self, attempt: int, order: Order, error: Exception) -> bool:
        if attempt >= self._max_attempts:
            logger.error(
                "Order %s failed after %d attempt(s): %s", order.id, attempt, error,
            )
            return False
        delay = self._backoff * attempt
        logger.warning(
            "Order %s attempt %d/%d failed (%s), retrying in %.2fs",
            order.id, attempt, self._max_attempts, error, delay,
        )
        await self._sleep(delay)
        return True

    def _sign(self, payload: str) -> Dict[str, str]:
        try:
            return build_headers(
                self._api_key, self._api_secret, payload, recv_window=self._recv_window,
            )
        except (TypeError, ValueError, UnicodeError) as e:
            raise SigningError(f"signing failed: {e}") from e

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        payload = compact_json(body)
        return await self._send(path, payload, self._sign(payload))

    async def _send(self, path: str, payload: str, headers: Dict[str, str]) -> Dict[str, Any]:
        try:
            response = await self._client.post(
                f"{self._base_url}{path}", content=payload, headers=headers,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if response.status_code >= 500:
            raise TransportError(f"HTTP {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(f"invalid JSON (HTTP {response.status_code})") from e

        ret_code = int(data.get("retCode", -1))
        if ret_code != 0:
            raise ExchangeError.from_response(ret_code, data.get("retMsg", ""))
        return data.get("result") or {}

    @staticmethod
    def _record_error(
        order: Order, history: List[Order], category: ErrorCategory, message: str,
    ) -> Order:
        failed = order.transition(OrderStatus.ERROR, category=category.value, last_error=message)
        history.append(failed)
        return failed

    def _fail(
        self,
        order: Order,
        history: List[Order],
        status: OrderStatus,
        outcome: OrderOutcome,
        category: ErrorCategory,
        message: str,
        attempts: int,
    ) -> OrderResult:
        failed = order.transition(status, category=category.value, last_error=message)
        history.append(failed)
        logger.warning("Order %s for %s: %s (%s)", order.id, order.symbol, outcome.value, message)
        return self._result(outcome, failed, attempts, category, message, history)

    @staticmethod
    def _result(
        outcome: OrderOutcome,
        order: Order,
        attempts: int,
        category: ErrorCategory,
        message: str,
        history: List[Order],
    ) -> OrderResult:
        return OrderResult(
            outcome=outcome,
            order=order,
            attempts=attempts,
            category=category,
            message=message,
            history=history,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
