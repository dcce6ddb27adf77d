"""
Dedupe Guard.

IDedupeStore backed by an in-process map of ``hash_key → last seen``,
optionally consulting the alert log so a restart inside the window
does not re-deliver an alert.

The lookup (memory, then alert log) and the insert run under one
``asyncio.Lock``: two concurrent identical alerts cannot both pass.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Dict, Optional

from signalgate.application.ports.dedupe_store import IDedupeStore
from signalgate.domain.repositories.alert_repository import IAlertRepository
from signalgate.shared.logging.logger import get_logger

logger = get_logger("dedupe_guard")


class DedupeGuard(IDedupeStore):

    def __init__(
        self,
        window_seconds: float = 60.0,
        alert_repository: Optional[IAlertRepository] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._window = window_seconds
        self._alert_repo = alert_repository
        self._clock = clock
        self._seen: Dict[str, float] = {}
        self._lock = asyncio.Lock()

    async def check_and_record(self, key: str) -> bool:
        async with self._lock:
            now = self._clock()
            self._evict(now)

            if key in self._seen:
                return False
            if self._alert_repo is not None and await self._logged_recently(key, now):
                self._seen[key] = now
                return False

            self._seen[key] = now
            return True

    async def _logged_recently(self, key: str, now: float) -> bool:
        try:
            return await self._alert_repo.exists_recent(key, now - self._window)
        except Exception as e:
            # memory alone decides while the alert log is unreachable
            logger.warning("Alert log lookup failed: %s", e)
            return False

    def _evict(self, now: float) -> None:
        expired = [k for k, seen in self._seen.items() if now - seen >= self._window]
        for k in expired:
            del self._seen[k]

    def __len__(self) -> int:
        return len(self._seen)
