from __future__ import annotations

import asyncio
import hashlib
import hmac
import json

import httpx

from signalgate.application.ports.order_gateway import ErrorCategory, OrderOutcome
from signalgate.domain.entities.order import OrderSide, OrderStatus
from signalgate.domain.value_objects.ticker import Ticker
from signalgate.infrastructure.external.bybit_gateway import BybitGateway
from signalgate.infrastructure.external.rate_limiter import RateLimiter

from conftest import FakeMarketData

BASE_URL = "https://api.bybit.test"


class Exchange:
    """MockTransport handler scripted with one reply per order/create call."""

    def __init__(self, replies=None, price="1000"):
        self.replies = list(replies or [])
        self.price = price
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v5/market/tickers":
            return httpx.Response(
                200, json={"retCode": 0, "result": {"list": [{"lastPrice": self.price}]}},
            )
        reply = self.replies.pop(0) if self.replies else {"retCode": 0, "result": {"orderId": "ex-1"}}
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, int):
            return httpx.Response(reply, text="upstream down")
        return httpx.Response(200, json=reply)

    def calls(self, path: str) -> list:
        return [r for r in self.requests if r.url.path == path]


def _live_gateway(exchange: Exchange, sleeps=None, **kwargs) -> BybitGateway:
    async def fake_sleep(delay):
        if sleeps is not None:
            sleeps.append(delay)

    return BybitGateway(
        BASE_URL,
        api_key="key",
        api_secret="secret",
        live_trading=True,
        client=httpx.AsyncClient(transport=httpx.MockTransport(exchange)),
        sleep=fake_sleep,
        **kwargs,
    )


def _statuses(result) -> list:
    return [o.status for o in result.history]


def test_live_order_signed_body() -> None:
    exchange = Exchange()
    gateway = _live_gateway(exchange)

    result = asyncio.run(gateway.place_order("BTCUSDT", OrderSide.BUY, 10.0, signal_id="sig-1"))

    assert result.outcome is OrderOutcome.FILLED
    assert result.ok
    assert result.attempts == 1
    assert result.order.exchange_order_id == "ex-1"
    assert result.order.signal_id == "sig-1"
    assert _statuses(result) == [
        OrderStatus.NEW, OrderStatus.SIGNED, OrderStatus.SENT, OrderStatus.FILLED,
    ]
    assert len({o.id for o in result.history}) == 1

    (request,) = exchange.calls("/v5/order/create")
    body = request.content.decode()
    sent = json.loads(body)
    assert sent["qty"] == "0.010"
    assert sent["side"] == "Buy"
    assert sent["timeInForce"] == "IOC"
    assert sent["orderLinkId"] == result.order.id

    headers = request.headers
    expected = hmac.new(
        b"secret",
        f"{headers['X-BAPI-TIMESTAMP']}key{headers['X-BAPI-RECV-WINDOW']}{body}".encode(),
        hashlib.sha256,
    ).hexdigest()
    assert headers["X-BAPI-SIGN"] == expected


def test_invalid_signature_rejected_without_retry() -> None:
    exchange = Exchange(replies=[{"retCode": 10004, "retMsg": "error sign!", "result": {}}])
    sleeps = []
    gateway = _live_gateway(exchange, sleeps)

    result = asyncio.run(gateway.place_order("BTCUSDT", OrderSide.SELL, 10.0))

    assert result.outcome is OrderOutcome.REJECTED
    assert result.category is ErrorCategory.INVALID_SIGNATURE
    assert result.attempts == 1
    assert len(exchange.calls("/v5/order/create")) == 1
    assert sleeps == []
    assert result.order.status is OrderStatus.REJECTED
    assert result.order.category == "invalid signature"


def test_insufficient_balance_category() -> None:
    exchange = Exchange(replies=[{"retCode": 110007, "retMsg": "ab not enough", "result": {}}])
    result = asyncio.run(_live_gateway(exchange).place_order("BTCUSDT", OrderSide.BUY, 10.0))
    assert result.outcome is OrderOutcome.REJECTED
    assert result.category is ErrorCategory.INSUFFICIENT_BALANCE


def test_network_failure_retried_with_backoff() -> None:
    exchange = Exchange(replies=[
        httpx.ConnectError("connection refused"),
        {"retCode": 0, "result": {"orderId": "ex-2"}},
    ])
    sleeps = []
    gateway = _live_gateway(exchange, sleeps)

    result = asyncio.run(gateway.place_order("BTCUSDT", OrderSide.BUY, 10.0))

    assert result.outcome is OrderOutcome.FILLED
    assert result.attempts == 2
    assert sleeps == [0.5]
    assert _statuses(result) == [
        OrderStatus.NEW, OrderStatus.SIGNED, OrderStatus.SENT, OrderStatus.ERROR,
        OrderStatus.NEW, OrderStatus.SIGNED, OrderStatus.SENT, OrderStatus.FILLED,
    ]
    assert [o.attempt for o in result.history] == [1, 1, 1, 1, 2, 2, 2, 2]
    assert result.history[3].category == "network"


def test_server_errors_exhaust_attempts() -> None:
    exchange = Exchange(replies=[503, 502, 500])
    sleeps = []
    gateway = _live_gateway(exchange, sleeps)

    result = asyncio.run(gateway.place_order("BTCUSDT", OrderSide.BUY, 10.0))

    assert result.outcome is OrderOutcome.ERROR
    assert result.category is ErrorCategory.NETWORK
    assert result.attempts == 3
    assert sleeps == [0.5, 1.0]
    assert len(exchange.calls("/v5/order/create")) == 3


def test_rate_limited_order_is_throttled() -> None:
    exchange = Exchange()
    gateway = _live_gateway(exchange, rate_limiter=RateLimiter(max_requests=0))

    result = asyncio.run(gateway.place_order("BTCUSDT", OrderSide.BUY, 10.0))

    assert result.outcome is OrderOutcome.THROTTLED
    assert result.category is ErrorCategory.RATE_LIMITED
    assert result.attempts == 0
    assert exchange.calls("/v5/order/create") == []
    assert _statuses(result) == [OrderStatus.NEW, OrderStatus.ERROR]


def test_unsupported_quote_asset_rejected() -> None:
    exchange = Exchange()
    result = asyncio.run(_live_gateway(exchange).place_order("BTCEUR", OrderSide.BUY, 10.0))
    assert result.outcome is OrderOutcome.REJECTED
    assert result.category is ErrorCategory.UNSUPPORTED_SYMBOL
    assert exchange.requests == []


def test_quantity_rounding_to_zero_rejected() -> None:
    exchange = Exchange(price="50000")
    result = asyncio.run(_live_gateway(exchange).place_order("BTCUSDT", OrderSide.BUY, 0.01))
    assert result.outcome is OrderOutcome.REJECTED
    assert result.category is ErrorCategory.INVALID_QUANTITY
    assert exchange.calls("/v5/order/create") == []


def test_leverage_not_modified_counts_as_success() -> None:
    exchange = Exchange(replies=[{"retCode": 110043, "retMsg": "leverage not modified"}])
    assert asyncio.run(_live_gateway(exchange).ensure_leverage("BTCUSDT", 5)) is True

    exchange = Exchange(replies=[{"retCode": 10001, "retMsg": "params error"}])
    assert asyncio.run(_live_gateway(exchange).ensure_leverage("BTCUSDT", 5)) is False


def test_cancel_order_outcomes() -> None:
    exchange = Exchange(replies=[{"retCode": 0, "result": {}}])
    result = asyncio.run(_live_gateway(exchange).cancel_order("BTCUSDT", "ex-1"))
    assert result.outcome is OrderOutcome.CANCELLED
    assert result.ok

    exchange = Exchange(replies=[{"retCode": 110001, "retMsg": "order not exists"}])
    result = asyncio.run(_live_gateway(exchange).cancel_order("BTCUSDT", "ex-1"))
    assert result.outcome is OrderOutcome.REJECTED
    assert result.category is ErrorCategory.BAD_REQUEST


# ════════════════════════════════════════════════════════════════
#  PAPER MODE
# ════════════════════════════════════════════════════════════════


def _offline_client() -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"paper mode called {request.url}")

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_paper_mode_without_credentials() -> None:
    gateway = BybitGateway(BASE_URL, api_key="key", api_secret="", live_trading=True)
    assert gateway.paper_mode


def test_paper_fill_at_price_hint() -> None:
    gateway = BybitGateway(BASE_URL, client=_offline_client())

    result = asyncio.run(gateway.place_order("BTCUSDT", OrderSide.BUY, 100.0, price_hint=50_000.0))

    assert result.outcome is OrderOutcome.FILLED
    assert result.order.paper is True
    assert result.order.quantity == 0.002
    assert result.order.price == 50_000.0
    assert result.order.exchange_order_id.startswith("PAPER-")
    assert _statuses(result) == [
        OrderStatus.NEW, OrderStatus.SIGNED, OrderStatus.SENT, OrderStatus.FILLED,
    ]


def test_paper_fill_uses_last_known_price() -> None:
    market = FakeMarketData(tickers={"ETHUSDT": Ticker(symbol="ETHUSDT", price=2_000.0)})
    gateway = BybitGateway(BASE_URL, market_data=market, client=_offline_client())

    async def run():
        await gateway.get_price("ETHUSDT")
        market.tickers.clear()
        return await gateway.place_order("ETHUSDT", OrderSide.BUY, 20.0)

    result = asyncio.run(run())
    assert result.order.price == 2_000.0
    assert result.order.quantity == 0.01


def test_paper_fill_falls_back_without_price() -> None:
    gateway = BybitGateway(BASE_URL, paper_fallback_price=100.0, client=_offline_client())

    result = asyncio.run(gateway.place_order("NEWUSDT", OrderSide.SELL, 10.0))

    assert result.outcome is OrderOutcome.FILLED
    assert result.order.quantity == 0.1
    assert result.order.price == 100.0


def test_paper_cancel_and_leverage() -> None:
    gateway = BybitGateway(BASE_URL, client=_offline_client())
    assert asyncio.run(gateway.ensure_leverage("BTCUSDT", 10)) is True
    assert asyncio.run(gateway.cancel_order("BTCUSDT", "x")).outcome is OrderOutcome.CANCELLED
