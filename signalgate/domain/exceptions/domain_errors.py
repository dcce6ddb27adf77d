"""
SignalGate – Domain Exceptions
==============================
Business-logic errors. Technical failures (HTTP, exchange) live in
infrastructure and never cross into the domain.

HIERARCHY:
    DomainError (base)
    └── OrderStateError
"""

from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class OrderStateError(DomainError):
    """Illegal transition of the order state machine."""

    def __init__(self, message: str, order_id: Optional[str] = None):
        super().__init__(message, code="ORDER_STATE")
        self.order_id = order_id
