"""Exchange adapter errors (never leave the infrastructure layer)."""

from __future__ import annotations

from typing import Optional

from signalgate.application.ports.order_gateway import ErrorCategory

_RET_CODE_CATEGORIES = {
    10004: ErrorCategory.INVALID_SIGNATURE,
    10003: ErrorCategory.INVALID_KEY,
    10005: ErrorCategory.PERMISSION_DENIED,
    170130: ErrorCategory.INSUFFICIENT_BALANCE,
    110007: ErrorCategory.INSUFFICIENT_BALANCE,
    10001: ErrorCategory.BAD_REQUEST,
    110001: ErrorCategory.BAD_REQUEST,
}


def categorize(ret_code: int) -> ErrorCategory:
    return _RET_CODE_CATEGORIES.get(ret_code, ErrorCategory.UNKNOWN)


class ExchangeError(Exception):
    """
    Application-level rejection (nonzero retCode).

    Terminal for the attempt: the exchange has answered, retrying the
    same request gives the same verdict.
    """

    retryable = False

    def __init__(self, category: ErrorCategory, ret_code: Optional[int], message: str):
        super().__init__(message)
        self.category = category
        self.ret_code = ret_code
        self.message = message

    @classmethod
    def from_response(cls, ret_code: int, message: str) -> "ExchangeError":
        return cls(categorize(ret_code), ret_code, message or f"retCode {ret_code}")

    def __str__(self) -> str:
        return f"[{self.ret_code}] {self.category.value}: {self.message}"


class TransportError(Exception):
    """Timeout, connection failure or HTTP 5xx."""

    category = ErrorCategory.NETWORK
    retryable = True


class SigningError(Exception):
    """The request could not be signed locally; nothing was sent."""

    category = ErrorCategory.INVALID_SIGNATURE
    retryable = True
