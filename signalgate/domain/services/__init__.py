"""Domain services - Pure business logic with no external dependencies."""
from signalgate.domain.services.indicator_calculator import IndicatorCalculator
from signalgate.domain.services.signal_rules import SignalRules, SignalRulesConfig, SignalAssembler
from signalgate.domain.services.signal_scoring import (
    TrendMomentumScoring,
    TrendMomentumConfig,
    CompleteAlgorithmConfidence,
    CompleteAlgorithmConfig,
    grade_from_confidence_and_rr,
)
from signalgate.domain.services.risk_calculator import RiskCalculator, RiskConfig, RiskLevels
from signalgate.domain.services.quality_gate import QualityGate, GateOptions
from signalgate.domain.services.execution_scorer import ExecutionScorer, ExecutionQuality

__all__ = [
    "IndicatorCalculator",
    "SignalRules",
    "SignalRulesConfig",
    "SignalAssembler",
    "TrendMomentumScoring",
    "TrendMomentumConfig",
    "CompleteAlgorithmConfidence",
    "CompleteAlgorithmConfig",
    "grade_from_confidence_and_rr",
    "RiskCalculator",
    "RiskConfig",
    "RiskLevels",
    "QualityGate",
    "GateOptions",
    "ExecutionScorer",
    "ExecutionQuality",
]
