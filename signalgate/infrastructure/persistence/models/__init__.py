"""
Infrastructure Models Package.

SQLAlchemy ORM models. They describe the database tables, NOT the
domain entities.
"""

from signalgate.infrastructure.persistence.models.alert import AlertLogModel
from signalgate.infrastructure.persistence.models.order import OrderModel
from signalgate.infrastructure.persistence.models.signal import SignalModel

__all__ = [
    "AlertLogModel",
    "OrderModel",
    "SignalModel",
]
