"""
SignalGate – Application Port: Alert Channel
============================================
One delivery target of the alert dispatcher (Telegram, webhooks, ...).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ChannelResult:
    channel: str
    ok: bool
    error: Optional[str] = None


class IAlertChannel(ABC):
    """
    Alert delivery channel.

    Implementations perform ONE delivery attempt; retries are applied
    uniformly by the dispatcher.
    """

    name: str = "channel"

    @abstractmethod
    async def send(self, text: str, metadata: Dict[str, Any]) -> ChannelResult:
        """
        Deliver a formatted alert.

        Returns:
            ChannelResult; transport failures are reported, not raised
        """
