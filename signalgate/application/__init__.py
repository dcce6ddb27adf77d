"""
SignalGate – Application Layer
==============================
Use cases and orchestration.

- use_cases/: orchestrators of the domain services
- ports/: interfaces towards infrastructure

DEPENDENCY RULE:
May import from domain/ and its own ports. Never from infrastructure/
or presentation/.
"""

from signalgate.application.use_cases import (
    GenerateSignalUseCase,
    GenerateSignalResult,
    ExecuteOrderUseCase,
    ExecuteOrderResult,
    SendAlertUseCase,
    AlertDispatchResult,
    ScanMarketUseCase,
    ScanResult,
)

__all__ = [
    "GenerateSignalUseCase",
    "GenerateSignalResult",
    "ExecuteOrderUseCase",
    "ExecuteOrderResult",
    "SendAlertUseCase",
    "AlertDispatchResult",
    "ScanMarketUseCase",
    "ScanResult",
]
