"""
Generate Signal Use Case.

Turns closed bars of one symbol/timeframe into a graded signal.
Orchestrates the domain services and publishes events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from signalgate.application.ports.event_publisher import IEventPublisher
from signalgate.domain.entities.bar import OhlcvBar
from signalgate.domain.entities.signal import CandidateSignal, GradedSignal
from signalgate.domain.events.domain_events import SignalFiltered, SignalGenerated
from signalgate.domain.repositories.signal_repository import ISignalRepository
from signalgate.domain.services.execution_scorer import ExecutionScorer
from signalgate.domain.services.indicator_calculator import IndicatorCalculator
from signalgate.domain.services.signal_rules import SignalAssembler
from signalgate.domain.value_objects.indicator_snapshot import IndicatorSnapshot
from signalgate.domain.value_objects.ticker import Ticker
from signalgate.shared.logging.logger import get_logger

logger = get_logger("usecase.generate_signal")


@dataclass
class GenerateSignalResult:
    """Result of one symbol/timeframe evaluation."""
    signal: Optional[GradedSignal] = None
    candidate: Optional[CandidateSignal] = None
    snapshot: Optional[IndicatorSnapshot] = None
    generated: bool = False
    filtered: bool = False
    filter_reason: Optional[str] = None


class GenerateSignalUseCase:
    """
    Use case: generate a graded signal.

    PIPELINE:
    1. Indicator snapshot (IndicatorCalculator)
    2. Candidate (SignalAssembler)
    3. Hard gate (QualityGate via ExecutionScorer.gate)
    4. Score / grade (ExecutionScorer)
    5. Persist + publish SignalGenerated

    Unavailable indicators and gate rejections are absorbed: the result
    says why, nothing is raised.
    """

    def __init__(
        self,
        signal_repository: ISignalRepository,
        event_publisher: IEventPublisher,
        assembler: SignalAssembler,
        scorer: ExecutionScorer,
    ):
        self._signal_repo = signal_repository
        self._event_publisher = event_publisher
        self._assembler = assembler
        self._scorer = scorer

    async def execute(
        self,
        symbol: str,
        timeframe: str,
        bars: Sequence[OhlcvBar],
        ticker: Optional[Ticker] = None,
        depth_usdt: float = 0.0,
        win_rates: Optional[Mapping[str, float]] = None,
    ) -> GenerateSignalResult:
        """
        Evaluate one symbol/timeframe.

        Args:
            symbol: Exchange symbol
            timeframe: Bar timeframe
            bars: Closed bars, oldest first
            ticker: Current ticker (price and spread); falls back to the
                last close when missing
            depth_usdt: Order-book depth (0 = unknown)
            win_rates: Historical win-rate per symbol
        """
        snapshot = IndicatorCalculator.build_snapshot(symbol, timeframe, bars)
        price = ticker.price if ticker and ticker.price else snapshot.price

        missing = self._assembler.rules.missing_fields(snapshot, price)
        if missing:
            logger.debug(
                "%s %s skipped: indicators unavailable (%s)",
                symbol, timeframe, ", ".join(missing),
            )
            return GenerateSignalResult(
                snapshot=snapshot,
                filter_reason="insufficient_data",
            )

        spread_bps = ticker.spread_bps if ticker else None
        candidate = self._assembler.assemble(
            snapshot,
            price=price,
            spread_bps=spread_bps,
            depth_usdt=depth_usdt,
        )
        if candidate is None:
            return GenerateSignalResult(snapshot=snapshot, filter_reason="no_setup")

        reason = self._scorer.gate.evaluate(candidate, win_rates)
        if reason is not None:
            logger.info(
                "Gate rejected %s %s %s: %s",
                candidate.direction.value, symbol, timeframe, reason,
            )
            await self._event_publisher.publish(
                SignalFiltered(
                    signal_id=candidate.id,
                    symbol=symbol,
                    timeframe=timeframe,
                    direction=candidate.direction.value,
                    filter_reason=reason,
                )
            )
            return GenerateSignalResult(
                candidate=candidate,
                snapshot=snapshot,
                filtered=True,
                filter_reason=reason,
            )

        signal = self._scorer.grade_signal(candidate)
        await self._signal_repo.save(signal)

        logger.info(
            f"Signal {signal.id}: {signal.direction.value} {symbol} {timeframe} "
            f"score={signal.execution_score:.3f} grade={signal.grade.value} "
            f"auto={signal.auto_tradeable}"
        )
        await self._event_publisher.publish(
            SignalGenerated(
                signal_id=signal.id,
                symbol=symbol,
                timeframe=timeframe,
                direction=signal.direction.value,
                entry=candidate.entry_price,
                stop_loss=candidate.stop_loss,
                take_profit=candidate.take_profit,
                execution_score=signal.execution_score,
                grade=signal.grade.value,
                auto_tradeable=signal.auto_tradeable,
            )
        )
        return GenerateSignalResult(
            signal=signal,
            candidate=candidate,
            snapshot=snapshot,
            generated=True,
        )
