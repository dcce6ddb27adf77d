"""Domain exceptions."""
from signalgate.domain.exceptions.domain_errors import DomainError, OrderStateError

__all__ = ["DomainError", "OrderStateError"]
