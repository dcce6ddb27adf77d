"""
SignalGate – Domain Repository Interface: Order
===============================================
Append-only order log. Each state transition is a new row; nothing is
ever updated in place.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from signalgate.domain.entities.order import Order


class IOrderRepository(ABC):

    @abstractmethod
    async def append(self, order: Order) -> None:
        """Append one order record to the log."""

    @abstractmethod
    async def history(self, order_id: str) -> List[Order]:
        """Every record of ``order_id`` in append order."""

    @abstractmethod
    async def find_recent(self, limit: int = 50) -> List[Order]:
        """Latest records, newest first."""
