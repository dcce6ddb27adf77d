from __future__ import annotations

import asyncio

import httpx

from signalgate.application.ports.order_gateway import OrderOutcome
from signalgate.application.use_cases.execute_order_usecase import ExecuteOrderUseCase
from signalgate.application.use_cases.generate_signal_usecase import GenerateSignalUseCase
from signalgate.application.use_cases.scan_market_usecase import ScanMarketUseCase
from signalgate.domain.entities.order import OrderStatus
from signalgate.domain.entities.signal import Direction, Grade
from signalgate.domain.events.domain_events import (
    OrderFailed,
    OrderFilled,
    SignalFiltered,
    SignalGenerated,
)
from signalgate.domain.services.execution_scorer import ExecutionScorer
from signalgate.domain.services.risk_calculator import RiskCalculator, RiskConfig
from signalgate.domain.services.signal_rules import SignalAssembler
from signalgate.domain.value_objects.ticker import Ticker
from signalgate.infrastructure.external.bybit_gateway import BybitGateway
from signalgate.infrastructure.persistence.repositories.in_memory import (
    InMemoryOrderRepository,
    InMemorySignalRepository,
)


def _wide_target_assembler() -> SignalAssembler:
    # RR 2.5 clears the default gate (min 1.8)
    return SignalAssembler(risk=RiskCalculator(RiskConfig(1.0, 2.5)))


def _generate(publisher, repo=None, assembler=None) -> GenerateSignalUseCase:
    return GenerateSignalUseCase(
        signal_repository=repo if repo is not None else InMemorySignalRepository(),
        event_publisher=publisher,
        assembler=assembler or _wide_target_assembler(),
        scorer=ExecutionScorer(),
    )


# ════════════════════════════════════════════════════════════════
#  GENERATE SIGNAL
# ════════════════════════════════════════════════════════════════

def test_generate_signal_persists_and_publishes(trending_bars, btc_ticker, publisher) -> None:
    repo = InMemorySignalRepository()
    usecase = _generate(publisher, repo)

    result = asyncio.run(usecase.execute(
        "BTCUSDT", "4h", trending_bars, ticker=btc_ticker, depth_usdt=50_000.0,
    ))

    assert result.generated
    assert result.signal.direction is Direction.LONG
    assert 0.0 <= result.signal.execution_score <= 1.0
    assert len(repo) == 1
    (event,) = publisher.of_type(SignalGenerated)
    assert event.signal_id == result.signal.id


def test_generate_signal_gate_rejection(trending_bars, btc_ticker, publisher) -> None:
    # default targets give RR 1.5 < 1.8
    usecase = _generate(publisher, assembler=SignalAssembler())

    result = asyncio.run(usecase.execute("BTCUSDT", "4h", trending_bars, ticker=btc_ticker))

    assert result.filtered
    assert result.filter_reason == "risk_reward"
    assert publisher.of_type(SignalGenerated) == []
    (event,) = publisher.of_type(SignalFiltered)
    assert event.filter_reason == "risk_reward"


def test_generate_signal_without_quotes_is_gate_rejected(trending_bars, publisher) -> None:
    last_only = Ticker(symbol="BTCUSDT", price=trending_bars[-1].close)

    result = asyncio.run(_generate(publisher).execute(
        "BTCUSDT", "4h", trending_bars, ticker=last_only, depth_usdt=50_000.0,
    ))

    assert not result.generated
    assert result.filter_reason == "spread"
    assert publisher.of_type(SignalGenerated) == []


def test_generate_signal_insufficient_history(trending_bars, publisher) -> None:
    result = asyncio.run(_generate(publisher).execute("BTCUSDT", "4h", trending_bars[:40]))
    assert not result.generated
    assert result.filter_reason == "insufficient_data"
    assert publisher.events == []


def test_generate_signal_no_setup_on_light_timeframe(trending_bars, btc_ticker, publisher) -> None:
    result = asyncio.run(_generate(publisher).execute("BTCUSDT", "15m", trending_bars, ticker=btc_ticker))
    assert result.filter_reason == "no_setup"


# ════════════════════════════════════════════════════════════════
#  SCAN MARKET
# ════════════════════════════════════════════════════════════════

def test_scan_ranks_and_skips_symbols_without_data(market_data, publisher) -> None:
    scan = ScanMarketUseCase(
        market_data=market_data,
        generate_signal=_generate(publisher),
        scorer=ExecutionScorer(),
        symbols=["BTCUSDT", "DEADUSDT"],
        timeframes=["4h"],
        bar_limit=260,
    )

    result = asyncio.run(scan.execute())

    assert result.evaluated == 1
    assert result.skipped_symbols == ["DEADUSDT"]
    assert len(result.signals) == 1
    assert market_data.bar_requests == [("BTCUSDT", "4h", 260)]
    summary = result.to_dict()
    assert summary["generated"] == 1
    assert summary["orders"] == []


def test_scan_isolates_a_failing_symbol(market_data, btc_ticker, publisher) -> None:
    market_data.tickers["BADUSDT"] = btc_ticker
    fetch = market_data.get_bars

    async def get_bars(symbol, timeframe, limit=200):
        if symbol == "BADUSDT":
            raise ValueError("could not convert string to float: 'x'")
        return await fetch(symbol, timeframe, limit)

    market_data.get_bars = get_bars
    scan = ScanMarketUseCase(
        market_data=market_data,
        generate_signal=_generate(publisher),
        scorer=ExecutionScorer(),
        symbols=["BADUSDT", "BTCUSDT"],
        timeframes=["4h"],
        bar_limit=260,
    )

    result = asyncio.run(scan.execute())

    assert result.skipped_symbols == ["BADUSDT"]
    assert result.evaluated == 1
    assert len(result.signals) == 1


def test_scan_counts_missing_bars(market_data, publisher) -> None:
    market_data.bars = {}
    scan = ScanMarketUseCase(
        market_data=market_data,
        generate_signal=_generate(publisher),
        scorer=ExecutionScorer(),
        symbols=["BTCUSDT"],
        timeframes=["1h", "4h"],
    )

    result = asyncio.run(scan.execute(["BTCUSDT"]))

    assert result.evaluated == 2
    assert result.filtered == {"no_data": 2}
    assert result.signals == []


# ════════════════════════════════════════════════════════════════
#  EXECUTE ORDER
# ════════════════════════════════════════════════════════════════

def test_execute_order_paper_fill(make_candidate, market_data, publisher) -> None:
    orders = InMemoryOrderRepository()
    usecase = ExecuteOrderUseCase(
        gateway=BybitGateway("https://api.bybit.test", market_data=market_data),
        order_repository=orders,
        event_publisher=publisher,
        usd_amount=100.0,
    )
    signal = make_candidate().graded(0.85, Grade.A, True)

    async def run():
        result = await usecase.execute(signal)
        return result, await orders.history(result.result.order.id)

    result, history = asyncio.run(run())

    assert result.executed
    assert result.result.outcome is OrderOutcome.FILLED
    assert [o.status for o in history] == [
        OrderStatus.NEW, OrderStatus.SIGNED, OrderStatus.SENT, OrderStatus.FILLED,
    ]
    (event,) = publisher.of_type(OrderFilled)
    assert event.signal_id == signal.id
    assert event.side == "Buy"
    assert event.paper is True


def test_execute_order_skips_non_tradeable(make_candidate, publisher) -> None:
    usecase = ExecuteOrderUseCase(
        gateway=BybitGateway("https://api.bybit.test"),
        order_repository=InMemoryOrderRepository(),
        event_publisher=publisher,
    )
    signal = make_candidate().graded(0.7, Grade.B, False)

    result = asyncio.run(usecase.execute(signal))

    assert not result.executed
    assert result.skipped_reason == "not_auto_tradeable"
    assert publisher.events == []


def test_execute_order_rejection_published(make_candidate, publisher) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v5/market/tickers":
            return httpx.Response(200, json={"retCode": 0, "result": {"list": [{"lastPrice": "100"}]}})
        return httpx.Response(200, json={"retCode": 10004, "retMsg": "error sign!"})

    gateway = BybitGateway(
        "https://api.bybit.test",
        api_key="key",
        api_secret="secret",
        live_trading=True,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    orders = InMemoryOrderRepository()
    usecase = ExecuteOrderUseCase(gateway=gateway, order_repository=orders, event_publisher=publisher)
    signal = make_candidate(direction=Direction.SHORT).graded(0.85, Grade.A, True)

    result = asyncio.run(usecase.execute(signal))

    assert result.result.outcome is OrderOutcome.REJECTED
    assert len(orders) == 4
    (event,) = publisher.of_type(OrderFailed)
    assert event.category == "invalid signature"
    assert event.attempts == 1
