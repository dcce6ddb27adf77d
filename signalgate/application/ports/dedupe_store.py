"""
SignalGate – Application Port: Dedupe Store
===========================================
Atomic "seen recently?" check used by the alert dispatcher.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IDedupeStore(ABC):

    @abstractmethod
    async def check_and_record(self, key: str) -> bool:
        """
        Record ``key`` unless it was seen inside the dedupe window.

        The read and the insert happen under one lock, so two concurrent
        callers with the same key never both get True.

        Returns:
            True if the key is new (caller may deliver), False if duplicate
        """
