"""Domain repository interfaces (ABCs)."""
from signalgate.domain.repositories.signal_repository import ISignalRepository
from signalgate.domain.repositories.order_repository import IOrderRepository
from signalgate.domain.repositories.alert_repository import IAlertRepository

__all__ = ["ISignalRepository", "IOrderRepository", "IAlertRepository"]
