from __future__ import annotations

import asyncio

import httpx
import pytest

from signalgate.infrastructure.external.bybit_market_data import (
    BybitMarketDataAdapter,
    orderbook_depth,
    parse_klines,
    parse_ticker,
)

KLINE_ROWS = [
    # newest first, the first row is still forming
    ["3000", "3", "4", "2", "3.5", "30", "0"],
    ["2000", "2", "3", "1", "2.5", "20", "0"],
    ["1000", "1", "2", "0.5", "1.5", "10", "0"],
]


def _adapter(handler) -> BybitMarketDataAdapter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BybitMarketDataAdapter("https://api.bybit.test", client=client)


def test_parse_klines_oldest_first_without_partial_bar() -> None:
    bars = parse_klines(KLINE_ROWS)
    assert [b.timestamp for b in bars] == [1000, 2000]
    assert bars[-1].close == 2.5
    assert len(parse_klines(KLINE_ROWS, drop_partial=False)) == 3


def test_parse_ticker_converts_change_to_percent() -> None:
    ticker = parse_ticker("BTCUSDT", {
        "lastPrice": "100", "bid1Price": "99.99", "ask1Price": "100.01",
        "volume24h": "1234", "price24hPcnt": "0.0123",
    })
    assert ticker.price == 100.0
    assert ticker.change_pct_24h == pytest.approx(1.23)
    assert ticker.spread_bps == pytest.approx(2.0)
    assert parse_ticker("BTCUSDT", {"lastPrice": ""}) is None


def test_orderbook_depth_is_thinner_side() -> None:
    book = {"b": [["100", "10"]], "a": [["101", "5"], ["102", "0"]]}
    assert orderbook_depth(book) == pytest.approx(505.0)
    assert orderbook_depth({}) == 0.0


def test_get_bars_requests_one_extra_bar() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"retCode": 0, "result": {"list": KLINE_ROWS}})

    bars = asyncio.run(_adapter(handler).get_bars("BTCUSDT", "1h", limit=200))

    assert len(bars) == 2
    params = seen[0].url.params
    assert seen[0].url.path == "/v5/market/kline"
    assert params["interval"] == "60"
    assert params["limit"] == "201"


def test_unsupported_timeframe_makes_no_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert asyncio.run(_adapter(handler).get_bars("BTCUSDT", "7m")) == []


def test_failures_are_absorbed() -> None:
    def server_down(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    def rejected(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"retCode": 10001, "retMsg": "params error"})

    down = _adapter(server_down)
    assert asyncio.run(down.get_bars("BTCUSDT", "1h")) == []
    assert asyncio.run(down.get_orderbook_depth("BTCUSDT")) == 0.0
    assert down.get_stats()["failures"] == 2

    assert asyncio.run(_adapter(rejected).get_ticker("BTCUSDT")) is None
    assert asyncio.run(_adapter(rejected).get_price("BTCUSDT")) is None


def test_get_ticker_and_depth() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v5/market/tickers":
            item = {"lastPrice": "42000.5", "bid1Price": "42000", "ask1Price": "42001"}
            return httpx.Response(200, json={"retCode": 0, "result": {"list": [item]}})
        return httpx.Response(200, json={
            "retCode": 0,
            "result": {"b": [["42000", "2"]], "a": [["42001", "3"]]},
        })

    async def run(adapter):
        return await adapter.get_ticker("BTCUSDT"), await adapter.get_orderbook_depth("BTCUSDT")

    ticker, depth = asyncio.run(run(_adapter(handler)))
    assert ticker.price == 42000.5
    assert depth == pytest.approx(84_000.0)


def test_malformed_kline_rows_are_skipped() -> None:
    rows = [
        ["4000", "4", "5", "3", "4.5", "40", "0"],
        ["3000", "x", "4", "2", "3.5", "30", "0"],
        ["2500", "2"],
        None,
        *KLINE_ROWS[1:],
    ]
    bars = parse_klines(rows)
    assert [b.timestamp for b in bars] == [1000, 2000]


def test_get_bars_with_garbage_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        rows = [["1", "x", "1", "1", "1", "1", "0"]] * 3
        return httpx.Response(200, json={"retCode": 0, "result": {"list": rows}})

    assert asyncio.run(_adapter(handler).get_bars("BTCUSDT", "1h")) == []
