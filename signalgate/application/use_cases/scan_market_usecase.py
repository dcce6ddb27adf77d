"""
Scan Market Use Case.

One scanner cycle: evaluates every configured symbol × timeframe,
ranks the graded signals and executes the auto-tradeable ones.

CONCURRENCY:
Symbols are evaluated concurrently through ``asyncio.gather`` bounded
by a semaphore (``scan_concurrency``). Stages of one symbol are
sequential. Only network I/O awaits.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from signalgate.application.ports.market_data_provider import IMarketDataProvider
from signalgate.application.use_cases.execute_order_usecase import (
    ExecuteOrderResult,
    ExecuteOrderUseCase,
)
from signalgate.application.use_cases.generate_signal_usecase import (
    GenerateSignalResult,
    GenerateSignalUseCase,
)
from signalgate.domain.entities.signal import GradedSignal
from signalgate.domain.services.execution_scorer import ExecutionScorer
from signalgate.shared.logging.logger import get_logger

logger = get_logger("usecase.scan_market")


@dataclass
class ScanResult:
    """Summary of one scan cycle."""
    signals: List[GradedSignal] = field(default_factory=list)
    evaluated: int = 0
    filtered: Dict[str, int] = field(default_factory=dict)
    skipped_symbols: List[str] = field(default_factory=list)
    orders: List[ExecuteOrderResult] = field(default_factory=list)
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "evaluated": self.evaluated,
            "generated": len(self.signals),
            "filtered": dict(self.filtered),
            "skipped_symbols": list(self.skipped_symbols),
            "signals": [s.to_dict() for s in self.signals],
            "orders": [o.result.to_dict() for o in self.orders if o.result],
            "duration_seconds": round(self.duration_seconds, 3),
        }


class ScanMarketUseCase:
    """
    Use case: run one market scan.

    USAGE:
        result = await scan.execute()
        result.signals  # ranked, best first
    """

    def __init__(
        self,
        market_data: IMarketDataProvider,
        generate_signal: GenerateSignalUseCase,
        scorer: ExecutionScorer,
        symbols: Sequence[str],
        timeframes: Sequence[str],
        execute_order: Optional[ExecuteOrderUseCase] = None,
        bar_limit: int = 300,
        concurrency: int = 8,
        win_rates: Optional[Mapping[str, float]] = None,
    ):
        self._market_data = market_data
        self._generate_signal = generate_signal
        self._scorer = scorer
        self._symbols = list(symbols)
        self._timeframes = list(timeframes)
        self._execute_order = execute_order
        self._bar_limit = bar_limit
        self._concurrency = max(1, concurrency)
        self._win_rates = dict(win_rates or {})

    async def execute(self, symbols: Optional[Sequence[str]] = None) -> ScanResult:
        started = time.monotonic()
        symbols = list(symbols) if symbols else self._symbols
        semaphore = asyncio.Semaphore(self._concurrency)

        async def bounded(symbol: str) -> List[GenerateSignalResult]:
            async with semaphore:
                try:
                    return await self._scan_symbol(symbol)
                except Exception as e:
                    logger.error(
                        "Scan of %s failed, skipping this cycle: %s", symbol, e, exc_info=True,
                    )
                    return []

        logger.info("Scan started: %d symbols × %d timeframes", len(symbols), len(self._timeframes))
        per_symbol = await asyncio.gather(*(bounded(s) for s in symbols))

        result = ScanResult()
        graded: List[GradedSignal] = []
        for symbol, outcomes in zip(symbols, per_symbol):
            if not outcomes:
                result.skipped_symbols.append(symbol)
                continue
            for outcome in outcomes:
                result.evaluated += 1
                if outcome.generated and outcome.signal is not None:
                    graded.append(outcome.signal)
                elif outcome.filter_reason:
                    result.filtered[outcome.filter_reason] = (
                        result.filtered.get(outcome.filter_reason, 0) + 1
                    )

        result.signals = self._scorer.rank(graded)

        if self._execute_order is not None:
            for signal in result.signals:
                if signal.auto_tradeable:
                    result.orders.append(await self._execute_order.execute(signal))

        result.duration_seconds = time.monotonic() - started
        logger.info(
            f"Scan finished in {result.duration_seconds:.2f}s: "
            f"{len(result.signals)} signal(s), {len(result.orders)} order(s), "
            f"{len(result.skipped_symbols)} symbol(s) without data"
        )
        return result

    async def _scan_symbol(self, symbol: str) -> List[GenerateSignalResult]:
        """Sequential evaluation of every timeframe of one symbol."""
        ticker = await self._market_data.get_ticker(symbol)
        if ticker is None:
            logger.warning("No ticker for %s, skipping this cycle", symbol)
            return []
        depth = await self._market_data.get_orderbook_depth(symbol)

        outcomes: List[GenerateSignalResult] = []
        for timeframe in self._timeframes:
            bars = await self._market_data.get_bars(symbol, timeframe, self._bar_limit)
            if not bars:
                logger.debug("No bars for %s %s", symbol, timeframe)
                outcomes.append(GenerateSignalResult(filter_reason="no_data"))
                continue
            outcomes.append(
                await self._generate_signal.execute(
                    symbol=symbol,
                    timeframe=timeframe,
                    bars=bars,
                    ticker=ticker,
                    depth_usdt=depth,
                    win_rates=self._win_rates,
                )
            )
        return outcomes
