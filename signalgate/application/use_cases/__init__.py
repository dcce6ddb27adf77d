"""Application use cases."""
from signalgate.application.use_cases.generate_signal_usecase import (
    GenerateSignalUseCase,
    GenerateSignalResult,
)
from signalgate.application.use_cases.execute_order_usecase import (
    ExecuteOrderUseCase,
    ExecuteOrderResult,
)
from signalgate.application.use_cases.send_alert_usecase import (
    SendAlertUseCase,
    AlertDispatchResult,
    AlertOutcome,
    AlertEventHandlers,
)
from signalgate.application.use_cases.scan_market_usecase import ScanMarketUseCase, ScanResult

__all__ = [
    "GenerateSignalUseCase",
    "GenerateSignalResult",
    "ExecuteOrderUseCase",
    "ExecuteOrderResult",
    "SendAlertUseCase",
    "AlertDispatchResult",
    "AlertOutcome",
    "AlertEventHandlers",
    "ScanMarketUseCase",
    "ScanResult",
]
