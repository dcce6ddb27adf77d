from __future__ import annotations

import pytest

from signalgate.domain.entities.signal import Grade
from signalgate.domain.services.execution_scorer import ExecutionScorer
from signalgate.domain.services.quality_gate import (
    GateOptions,
    QualityGate,
    base_asset,
    is_innovation_zone,
    normalize_timeframe,
)


# ════════════════════════════════════════════════════════════════
#  QUALITY GATE
# ════════════════════════════════════════════════════════════════

def test_gate_passes_clean_candidate(make_candidate) -> None:
    assert QualityGate().evaluate(make_candidate()) is None


def test_gate_rejects_wide_spread(make_candidate) -> None:
    assert QualityGate().evaluate(make_candidate(spread_bps=20.0)) == "spread"


def test_gate_rejects_banned_timeframe_first(make_candidate) -> None:
    candidate = make_candidate(timeframe="1m", spread_bps=50.0)
    assert QualityGate().evaluate(candidate) == "banned_timeframe"


def test_gate_bans_timeframe_aliases(make_candidate) -> None:
    gate = QualityGate()
    for alias in ("1min", "1 minute", " 1MIN", "01m"):
        assert gate.evaluate(make_candidate(timeframe=alias)) == "banned_timeframe"
    assert gate.evaluate(make_candidate(timeframe="15min")) is None
    assert normalize_timeframe("4 hours") == "4h"
    assert normalize_timeframe("weekly") == "weekly"


def test_gate_depth_zero_means_unknown(make_candidate) -> None:
    gate = QualityGate()
    assert gate.evaluate(make_candidate(orderbook_depth_usdt=500.0)) == "depth"
    assert gate.evaluate(make_candidate(orderbook_depth_usdt=0.0)) is None


def test_gate_rejects_low_risk_reward(make_candidate) -> None:
    assert QualityGate().evaluate(make_candidate(risk_reward=1.5)) == "risk_reward"
    relaxed = QualityGate(GateOptions(min_rr=1.5))
    assert relaxed.evaluate(make_candidate(risk_reward=1.5)) is None


def test_gate_symbol_win_rate(make_candidate) -> None:
    gate = QualityGate()
    assert gate.evaluate(make_candidate(), {"BTCUSDT": 0.40}) == "symbol_win_rate"
    assert gate.evaluate(make_candidate(), {"ETHUSDT": 0.40}) is None


def test_gate_innovation_zone(make_candidate) -> None:
    assert base_asset("SHIB/USDT") == "SHIB"
    assert is_innovation_zone("SHIBUSDT")
    assert QualityGate().evaluate(make_candidate(symbol="SHIBUSDT")) == "innovation_zone"
    allowed = QualityGate(GateOptions(exclude_innovation_zone=False))
    assert allowed.passes(make_candidate(symbol="SHIBUSDT"))


# ════════════════════════════════════════════════════════════════
#  EXECUTION SCORE / GRADE
# ════════════════════════════════════════════════════════════════

def test_best_case_score(make_candidate) -> None:
    candidate = make_candidate(spread_bps=0.0, orderbook_depth_usdt=2_000.0)
    graded = ExecutionScorer().grade_signal(candidate)

    # 0.55 × 1 + 0.20 × 1 + 0.15 × 0.4 - 0.10 × 0
    assert graded.execution_score == pytest.approx(0.81)
    assert graded.grade is Grade.A
    assert graded.auto_tradeable is True
    assert graded.candidate is candidate


def test_score_clamped_to_unit_interval(make_candidate) -> None:
    worst = make_candidate(
        model_confidence=0.0, raw_score=0.0, risk_reward=0.0, trend_fit=0.0,
        pullback_fit=0.0, spread_bps=100.0, orderbook_depth_usdt=0.0,
    )
    assert ExecutionScorer.execution_score(worst) == 0.0


def test_grade_is_monotonic() -> None:
    scores = [0.0, 0.3, 0.64, 0.65, 0.7, 0.79, 0.8, 0.85, 0.9, 1.0]
    order = {Grade.C: 0, Grade.B: 1, Grade.A: 2, Grade.A_PLUS: 3}
    ranks = [order[ExecutionScorer.grade(s)] for s in scores]
    assert ranks == sorted(ranks)
    assert ExecutionScorer.grade(0.9) is Grade.A_PLUS
    assert ExecutionScorer.grade(0.8) is Grade.A
    assert ExecutionScorer.grade(0.65) is Grade.B


def test_auto_trade_floor_requires_risk_reward() -> None:
    assert not ExecutionScorer.is_auto_tradeable(Grade.A_PLUS, 0.95, 1.9, 5.0)
    assert not ExecutionScorer.is_auto_tradeable(Grade.A_PLUS, 0.95, 2.5, 16.0)
    assert not ExecutionScorer.is_auto_tradeable(Grade.B, 0.95, 2.5, 5.0)
    assert ExecutionScorer.is_auto_tradeable(Grade.A, 0.8, 2.0, 15.0)


def test_ranking_ties_prefer_newest(make_candidate) -> None:
    scorer = ExecutionScorer()
    older = make_candidate(timestamp=1_000.0).graded(0.7, Grade.B, False)
    newer = make_candidate(timestamp=2_000.0).graded(0.7 - 1e-7, Grade.B, False)
    best = make_candidate(timestamp=500.0).graded(0.9, Grade.A_PLUS, False)

    ranked = scorer.rank([older, newer, best])
    assert [s.id for s in ranked] == [best.id, newer.id, older.id]


def test_filter_and_rank_drops_gated(make_candidate) -> None:
    scorer = ExecutionScorer()
    ok = make_candidate()
    wide = make_candidate(spread_bps=30.0)
    ranked = scorer.filter_and_rank([ok, wide])
    assert [s.id for s in ranked] == [ok.id]


def test_execution_quality(make_candidate) -> None:
    tight = ExecutionScorer.estimate_execution_quality(
        make_candidate(spread_bps=5.0, orderbook_depth_usdt=2_000.0)
    )
    assert tight.quality == "Excellent"
    assert tight.fill_odds == pytest.approx(0.9)

    unknown_depth = ExecutionScorer.estimate_execution_quality(
        make_candidate(spread_bps=5.0, orderbook_depth_usdt=0.0)
    )
    assert unknown_depth.fill_odds == pytest.approx(0.3)
    assert unknown_depth.quality == "Poor"
