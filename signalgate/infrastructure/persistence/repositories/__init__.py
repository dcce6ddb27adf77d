from signalgate.infrastructure.persistence.repositories.alert_repository_impl import (
    AlertRepositoryImpl,
)
from signalgate.infrastructure.persistence.repositories.in_memory import (
    InMemoryAlertRepository,
    InMemoryOrderRepository,
    InMemorySignalRepository,
)
from signalgate.infrastructure.persistence.repositories.order_repository_impl import (
    OrderRepositoryImpl,
)
from signalgate.infrastructure.persistence.repositories.signal_repository_impl import (
    SignalRepositoryImpl,
)

__all__ = [
    "AlertRepositoryImpl",
    "InMemoryAlertRepository",
    "InMemoryOrderRepository",
    "InMemorySignalRepository",
    "OrderRepositoryImpl",
    "SignalRepositoryImpl",
]
