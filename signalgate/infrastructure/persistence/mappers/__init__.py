from signalgate.infrastructure.persistence.mappers.alert_mapper import AlertMapper
from signalgate.infrastructure.persistence.mappers.order_mapper import OrderMapper
from signalgate.infrastructure.persistence.mappers.signal_mapper import SignalMapper

__all__ = ["AlertMapper", "OrderMapper", "SignalMapper"]
