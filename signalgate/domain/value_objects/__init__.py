"""Domain value objects."""
from signalgate.domain.value_objects.indicator_snapshot import IndicatorSnapshot
from signalgate.domain.value_objects.ticker import Ticker

__all__ = ["IndicatorSnapshot", "Ticker"]
