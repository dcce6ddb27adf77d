"""
SignalGate – Domain Repository Interface: Signal
================================================
Contract for persisting graded signals.

CLEAN ARCHITECTURE RULE:
- The interface lives in domain/
- Implementations (in-memory, SQLAlchemy) live in infrastructure/
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from signalgate.domain.entities.signal import GradedSignal


class ISignalRepository(ABC):
    """
    Abstract graded-signal repository.

    All operations are async so they never block the event loop.
    """

    @abstractmethod
    async def save(self, signal: GradedSignal) -> str:
        """
        Persist a graded signal.

        Returns:
            Id of the persisted signal
        """

    @abstractmethod
    async def find_by_id(self, signal_id: str) -> Optional[GradedSignal]:
        """Signal with ``signal_id`` or None."""

    @abstractmethod
    async def find_recent(
        self,
        limit: int = 50,
        symbol: Optional[str] = None,
    ) -> List[GradedSignal]:
        """
        Most recent signals, newest first.

        Args:
            limit: Max results
            symbol: Optional symbol filter
        """
