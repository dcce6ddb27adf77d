"""
SignalGate – Domain Repository Interface: Alert log
===================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from signalgate.domain.entities.alert import AlertEvent


class IAlertRepository(ABC):

    @abstractmethod
    async def save(self, alert: AlertEvent) -> None:
        """Persist a dispatched alert."""

    @abstractmethod
    async def exists_recent(self, hash_key: str, since: float) -> bool:
        """
        True when an alert with ``hash_key`` was stored at or after ``since``
        (epoch seconds). Used by the dedupe guard across restarts.
        """

    @abstractmethod
    async def find_recent(self, limit: int = 50) -> List[AlertEvent]:
        """Latest alerts, newest first."""
