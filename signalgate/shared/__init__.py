"""
SignalGate – Shared Module
==========================
Cross-cutting helpers used by every layer.

- config/: Settings
- logging/: Logging setup

No business logic lives here.
"""

from signalgate.shared.config.settings import settings, Settings
from signalgate.shared.logging.logger import setup_logging, get_logger

__all__ = [
    "settings",
    "Settings",
    "setup_logging",
    "get_logger",
]
