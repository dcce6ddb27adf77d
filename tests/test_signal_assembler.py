from __future__ import annotations

import pytest

from signalgate.domain.entities.signal import Direction, Grade
from signalgate.domain.services.risk_calculator import RiskCalculator, RiskConfig
from signalgate.domain.services.execution_scorer import ExecutionScorer
from signalgate.domain.services.quality_gate import GateOptions, QualityGate
from signalgate.domain.services.signal_rules import UNKNOWN_SPREAD_BPS, SignalAssembler
from signalgate.domain.services.signal_scoring import (
    CompleteAlgorithmConfidence,
    TrendMomentumScoring,
    grade_from_confidence_and_rr,
    timeframe_weight,
)
from signalgate.domain.value_objects.indicator_snapshot import IndicatorSnapshot


def _long_snapshot(**overrides) -> IndicatorSnapshot:
    fields = dict(
        symbol="BTCUSDT",
        timeframe="1h",
        price=106.0,
        rsi14=60.0,
        ema21=105.0,
        ema50=100.0,
        sma200=90.0,
        atr14=2.0,
        volume_ratio=1.5,
    )
    fields.update(overrides)
    return IndicatorSnapshot(**fields)


def _short_snapshot(**overrides) -> IndicatorSnapshot:
    fields = dict(
        symbol="ETHUSDT",
        timeframe="1h",
        price=94.0,
        rsi14=40.0,
        ema21=95.0,
        ema50=100.0,
        sma200=110.0,
        atr14=2.0,
        volume_ratio=1.5,
    )
    fields.update(overrides)
    return IndicatorSnapshot(**fields)


def test_aligned_long_setup_scores_above_threshold() -> None:
    candidate = SignalAssembler().assemble(_long_snapshot())

    assert candidate is not None
    assert candidate.direction is Direction.LONG
    # (20 trend + 15 rsi + 10 volume + 5 pullback + 5 atr) × 1.5
    assert candidate.raw_score == pytest.approx(82.5)
    assert candidate.raw_score >= 75
    assert candidate.stop_loss == pytest.approx(102.0)
    assert candidate.take_profit == pytest.approx(112.0)
    assert candidate.risk_reward == pytest.approx(1.5)
    assert candidate.conditions[:3] == ("trend_aligned", "rsi_momentum", "volume_confirmed")


def test_short_setup_is_symmetric() -> None:
    candidate = SignalAssembler().assemble(_short_snapshot())

    assert candidate is not None
    assert candidate.direction is Direction.SHORT
    assert candidate.raw_score == pytest.approx(82.5)
    assert candidate.stop_loss == pytest.approx(98.0)
    assert candidate.take_profit == pytest.approx(88.0)


def test_momentum_outside_band_gives_nothing() -> None:
    assert SignalAssembler().assemble(_long_snapshot(rsi14=80.0)) is None
    assert SignalAssembler().assemble(_short_snapshot(rsi14=20.0)) is None


def test_weak_volume_gives_nothing() -> None:
    assert SignalAssembler().assemble(_long_snapshot(volume_ratio=1.1)) is None


def test_score_below_threshold_on_light_timeframe() -> None:
    # same setup on 5m: 55 × 1.0 < 75
    assert SignalAssembler().assemble(_long_snapshot(timeframe="5m")) is None


def test_missing_indicator_gives_nothing() -> None:
    assert SignalAssembler().assemble(_long_snapshot(sma200=None)) is None


def test_misaligned_stack_gives_nothing() -> None:
    assert SignalAssembler().assemble(_long_snapshot(ema50=104.0, sma200=110.0)) is None


def test_configurable_risk_multipliers() -> None:
    assembler = SignalAssembler(risk=RiskCalculator(RiskConfig(1.0, 2.5)))
    candidate = assembler.assemble(_long_snapshot())
    assert candidate.risk_reward == pytest.approx(2.5)
    assert candidate.stop_loss == pytest.approx(104.0)


def test_unknown_spread_fails_closed() -> None:
    assembler = SignalAssembler(risk=RiskCalculator(RiskConfig(1.0, 2.5)))
    candidate = assembler.assemble(_long_snapshot(), spread_bps=None)

    assert candidate.spread_bps == UNKNOWN_SPREAD_BPS
    assert QualityGate().evaluate(candidate) == "spread"

    lenient = ExecutionScorer(QualityGate(GateOptions(max_spread_bps=1_000.0)))
    assert lenient.gate.passes(candidate)
    assert lenient.grade_signal(candidate).auto_tradeable is False


def test_score_stays_in_range() -> None:
    scoring = TrendMomentumScoring()
    snapshot = _long_snapshot(timeframe="4h", rsi14=74.0, volume_ratio=5.0)
    assert 0.0 <= scoring.score(snapshot, Direction.LONG, 106.0) <= 100.0


def test_unknown_timeframe_is_neutral() -> None:
    assert timeframe_weight("3d") == 1.0
    assert timeframe_weight("4h") == 1.8


def test_confidence_floor_and_ceiling() -> None:
    confidence = CompleteAlgorithmConfidence()
    assert confidence.confidence(_long_snapshot(), Direction.LONG) == 70

    strong = _long_snapshot(
        volume_ratio=3.0, hvp=100.0, stoch_k=80.0, stoch_d=70.0,
        plus_di=30.0, minus_di=10.0, adx=25.0,
    )
    assert confidence.confidence(strong, Direction.LONG) == 95


def test_confidence_grade_steps() -> None:
    assert grade_from_confidence_and_rr(92, 1.5) is Grade.A_PLUS
    assert grade_from_confidence_and_rr(92, 1.35) is Grade.A
    assert grade_from_confidence_and_rr(82, 2.0) is Grade.B
    assert grade_from_confidence_and_rr(70, 3.0) is Grade.C
