"""
In-memory repositories.

Used when the database is disabled (the default) and in tests. Same
contracts as the SQLAlchemy implementations; an ``asyncio.Lock`` keeps
appends ordered when coroutines interleave.
"""

from __future__ import annotations

import asyncio
from collections import deque
from itertools import islice
from typing import Deque, Dict, List, Optional

from signalgate.domain.entities.alert import AlertEvent
from signalgate.domain.entities.order import Order
from signalgate.domain.entities.signal import GradedSignal
from signalgate.domain.repositories.alert_repository import IAlertRepository
from signalgate.domain.repositories.order_repository import IOrderRepository
from signalgate.domain.repositories.signal_repository import ISignalRepository


class InMemorySignalRepository(ISignalRepository):

    def __init__(self, max_size: int = 10_000):
        self._signals: Dict[str, GradedSignal] = {}
        self._max_size = max_size
        self._lock = asyncio.Lock()

    async def save(self, signal: GradedSignal) -> str:
        async with self._lock:
            self._signals[signal.id] = signal
            # dicts keep insertion order: evict the oldest
            while len(self._signals) > self._max_size:
                del self._signals[next(iter(self._signals))]
        return signal.id

    async def find_by_id(self, signal_id: str) -> Optional[GradedSignal]:
        return self._signals.get(signal_id)

    async def find_recent(
        self,
        limit: int = 50,
        symbol: Optional[str] = None,
    ) -> List[GradedSignal]:
        signals = [s for s in self._signals.values() if symbol is None or s.symbol == symbol]
        signals.sort(key=lambda s: s.timestamp, reverse=True)
        return signals[:limit]

    def __len__(self) -> int:
        return len(self._signals)


class InMemoryOrderRepository(IOrderRepository):
    """Append-only log keeping the newest ``max_size`` records."""

    def __init__(self, max_size: int = 50_000):
        self._log: Deque[Order] = deque(maxlen=max_size)
        self._lock = asyncio.Lock()

    async def append(self, order: Order) -> None:
        async with self._lock:
            self._log.append(order)

    async def history(self, order_id: str) -> List[Order]:
        return [o for o in self._log if o.id == order_id]

    async def find_recent(self, limit: int = 50) -> List[Order]:
        return list(islice(reversed(self._log), limit))

    def __len__(self) -> int:
        return len(self._log)


class InMemoryAlertRepository(IAlertRepository):
    """
    Alert log keeping the newest ``max_size`` alerts.

    ``exists_recent`` reads a hash_key → newest created_at index instead
    of scanning the log.
    """

    def __init__(self, max_size: int = 10_000):
        self._alerts: Deque[AlertEvent] = deque(maxlen=max_size)
        self._last_seen: Dict[str, float] = {}
        self._lock = asyncio.Lock()

    async def save(self, alert: AlertEvent) -> None:
        async with self._lock:
            if len(self._alerts) == self._alerts.maxlen:
                self._forget(self._alerts[0])
            self._alerts.append(alert)
            if alert.created_at >= self._last_seen.get(alert.hash_key, float("-inf")):
                self._last_seen[alert.hash_key] = alert.created_at

    def _forget(self, oldest: AlertEvent) -> None:
        if self._last_seen.get(oldest.hash_key) == oldest.created_at:
            del self._last_seen[oldest.hash_key]

    async def exists_recent(self, hash_key: str, since: float) -> bool:
        seen = self._last_seen.get(hash_key)
        return seen is not None and seen >= since

    async def find_recent(self, limit: int = 50) -> List[AlertEvent]:
        return list(islice(reversed(self._alerts), limit))

    def __len__(self) -> int:
        return len(self._alerts)
