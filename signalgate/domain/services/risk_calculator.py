"""
SignalGate – Domain Service: Risk Calculator
============================================
ATR based stop loss / take profit levels.

FORMULAS:
- SL distance = ATR × stop_atr_multiplier   (default 2)
- TP distance = ATR × take_profit_atr_multiplier (default 3)
- RR = TP distance / SL distance (computed, 1.5 with the defaults)

LONG:  SL below entry, TP above.
SHORT: SL above entry, TP below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from signalgate.domain.entities.signal import Direction


@dataclass
class RiskConfig:
    """Risk management configuration."""

    stop_atr_multiplier: float = 2.0
    take_profit_atr_multiplier: float = 3.0


@dataclass
class RiskLevels:
    """Result of the level calculation."""

    entry: float
    stop_loss: float
    take_profit: float
    rr: float
    sl_distance: float
    tp_distance: float
    is_valid: bool
    rejection_reason: Optional[str] = None


class RiskCalculator:
    """
    Calculator of risk levels.

    No external dependencies; invalid inputs are reported through
    ``RiskLevels.is_valid`` instead of raising.
    """

    def __init__(self, config: RiskConfig = None):
        self._config = config or RiskConfig()

    def calculate_levels(
        self,
        direction: Direction,
        entry_price: float,
        atr: float,
    ) -> RiskLevels:
        """
        SL, TP and RR for a signal.

        Args:
            direction: LONG or SHORT
            entry_price: Entry (current price)
            atr: Current ATR value

        Returns:
            RiskLevels; is_valid is False for non-positive price or ATR
        """
        sl_distance = atr * self._config.stop_atr_multiplier
        tp_distance = atr * self._config.take_profit_atr_multiplier

        if entry_price <= 0 or atr <= 0:
            return RiskLevels(
                entry=entry_price,
                stop_loss=0.0,
                take_profit=0.0,
                rr=0.0,
                sl_distance=sl_distance,
                tp_distance=tp_distance,
                is_valid=False,
                rejection_reason="Non-positive price or ATR",
            )

        if direction is Direction.LONG:
            stop_loss = entry_price - sl_distance
            take_profit = entry_price + tp_distance
        else:
            stop_loss = entry_price + sl_distance
            take_profit = entry_price - tp_distance

        return RiskLevels(
            entry=entry_price,
            stop_loss=stop_loss,
            take_profit=take_profit,
            rr=tp_distance / sl_distance,
            sl_distance=sl_distance,
            tp_distance=tp_distance,
            is_valid=True,
        )
