"""
SignalGate – Domain Entity: AlertEvent
======================================
Persisted record of a dispatched alert.

- hash_key:     sha256 of event + sorted metadata, used for dedupe
- delivered_to: channel name → delivered (bool)
- status:       "delivered" when at least one channel succeeded, else "error"
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.CRITICAL: 3,
}


@dataclass(frozen=True, slots=True)
class AlertEvent:
    event: str
    title: str
    message: str
    severity: Severity
    metadata: Dict[str, Any]
    hash_key: str
    delivered_to: Dict[str, bool] = field(default_factory=dict)
    status: str = "delivered"
    error_msg: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "event": self.event,
            "title": self.title,
            "message": self.message,
            "severity": self.severity.value,
            "metadata": dict(self.metadata),
            "hash_key": self.hash_key,
            "delivered_to": dict(self.delivered_to),
            "status": self.status,
            "error_msg": self.error_msg,
            "created_at": self.created_at,
        }
