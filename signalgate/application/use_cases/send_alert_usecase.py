"""
Send Alert Use Case (Alert Dispatcher).

Deduplicated, severity-gated fan-out of alerts to the configured
channels, with every dispatched alert persisted to the alert log.

FLOW:
1. Global switch           → "disabled"
2. Severity below minimum  → "skipped"
3. hash_key = sha256(event + ":" + sorted-key JSON of metadata)
4. Dedupe window (atomic)  → "deduped"
5. Concurrent fan-out      → "delivered" if any channel succeeded,
                             otherwise "failed"
6. AlertEvent appended to the alert log
"""

from __future__ import annotations

import asyncio
import hashlib
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from signalgate.application.ports.alert_channel import ChannelResult, IAlertChannel
from signalgate.application.ports.dedupe_store import IDedupeStore
from signalgate.domain.entities.alert import AlertEvent, Severity
from signalgate.domain.events.domain_events import (
    OrderFailed,
    OrderFilled,
    SignalGenerated,
)
from signalgate.domain.repositories.alert_repository import IAlertRepository
from signalgate.shared.logging.logger import get_logger

logger = get_logger("usecase.send_alert")

SEVERITY_ICONS = {
    Severity.CRITICAL: "🚨",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ️",
}


class AlertOutcome(str, Enum):
    DISABLED = "disabled"
    SKIPPED = "skipped"
    DEDUPED = "deduped"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class AlertDispatchResult:
    outcome: AlertOutcome
    hash_key: Optional[str] = None
    results: List[ChannelResult] = field(default_factory=list)

    @property
    def delivered(self) -> bool:
        return self.outcome is AlertOutcome.DELIVERED


def stable_json(data: Mapping[str, Any]) -> str:
    """Compact JSON with sorted keys; equal mappings give equal strings."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)


def compute_hash_key(event: str, metadata: Optional[Mapping[str, Any]]) -> str:
    payload = f"{event}:{stable_json(metadata or {})}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def format_text(event: str, title: str, message: str, severity: Severity) -> str:
    """``"{icon} {title} ({event})\\n{message}"``; channels add the metadata block."""
    return f"{SEVERITY_ICONS[severity]} {title} ({event})\n{message}"


class SendAlertUseCase:
    """
    Use case: dispatch one alert.

    Channels are expected to be wrapped in the uniform retry wrapper
    (``RetryingAlertChannel``) by the composition root.
    """

    def __init__(
        self,
        channels: Sequence[IAlertChannel],
        dedupe_store: IDedupeStore,
        alert_repository: Optional[IAlertRepository] = None,
        enabled: bool = True,
        min_severity: Severity = Severity.INFO,
    ):
        self._channels = list(channels)
        self._dedupe = dedupe_store
        self._alert_repo = alert_repository
        self._enabled = enabled
        self._min_severity = Severity(min_severity)

    @property
    def channel_names(self) -> List[str]:
        return [c.name for c in self._channels]

    async def execute(
        self,
        event: str,
        title: str,
        message: str,
        severity: Severity = Severity.INFO,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AlertDispatchResult:
        if not self._enabled:
            return AlertDispatchResult(outcome=AlertOutcome.DISABLED)

        severity = Severity(severity)
        if severity.rank < self._min_severity.rank:
            logger.debug("Alert %s below minimum severity (%s)", event, severity.value)
            return AlertDispatchResult(outcome=AlertOutcome.SKIPPED)

        metadata = dict(metadata or {})
        hash_key = compute_hash_key(event, metadata)
        if not await self._dedupe.check_and_record(hash_key):
            logger.debug("Alert %s deduped (%s)", event, hash_key[:12])
            return AlertDispatchResult(outcome=AlertOutcome.DEDUPED, hash_key=hash_key)

        text = format_text(event, title, message, severity)
        results: List[ChannelResult] = list(
            await asyncio.gather(*(c.send(text, metadata) for c in self._channels))
        )

        any_ok = any(r.ok for r in results)
        outcome = AlertOutcome.DELIVERED if any_ok else AlertOutcome.FAILED
        error_msg = None
        if not any_ok:
            error_msg = next((r.error for r in results if r.error), "no channel configured")
            logger.error("Alert '%s' not delivered: %s", event, error_msg)
        else:
            logger.info(
                "Alert '%s' delivered to %s",
                event, ", ".join(r.channel for r in results if r.ok),
            )

        if self._alert_repo is not None:
            try:
                await self._alert_repo.save(
                    AlertEvent(
                        event=event,
                        title=title,
                        message=message,
                        severity=severity,
                        metadata=metadata,
                        hash_key=hash_key,
                        delivered_to={r.channel: r.ok for r in results},
                        status="delivered" if any_ok else "error",
                        error_msg=error_msg,
                    )
                )
            except Exception as e:
                logger.warning("Alert '%s' not persisted: %s", event, e)

        return AlertDispatchResult(outcome=outcome, hash_key=hash_key, results=results)

    send_alert = execute


class AlertEventHandlers:
    """
    Event bus handlers that turn domain events into alerts.

    signal found → info, order filled → info, order failed → critical.
    """

    def __init__(self, send_alert: SendAlertUseCase):
        self._send_alert = send_alert

    def handlers(self) -> dict:
        """event type name → async handler, for ``EventBusAdapter.register_handler``."""
        return {
            SignalGenerated.__name__: self.on_signal_generated,
            OrderFilled.__name__: self.on_order_filled,
            OrderFailed.__name__: self.on_order_failed,
        }

    async def on_signal_generated(self, event: SignalGenerated) -> None:
        await self._send_alert.execute(
            event="signal_found",
            title=f"{event.direction} {event.symbol} {event.timeframe}",
            message=(
                f"Grade {event.grade} (score {event.execution_score:.2f})\n"
                f"Entry {event.entry:g} | SL {event.stop_loss:g} | TP {event.take_profit:g}"
            ),
            severity=Severity.INFO,
            metadata={
                "symbol": event.symbol,
                "timeframe": event.timeframe,
                "direction": event.direction,
                "grade": event.grade,
            },
        )

    async def on_order_filled(self, event: OrderFilled) -> None:
        mode = "paper" if event.paper else "live"
        await self._send_alert.execute(
            event="order_filled",
            title=f"{event.side} {event.symbol} filled",
            message=f"{event.quantity:g} @ {event.price:g} ({mode}) id={event.exchange_order_id}",
            severity=Severity.INFO,
            metadata={"symbol": event.symbol, "order_id": event.order_id, "paper": event.paper},
        )

    async def on_order_failed(self, event: OrderFailed) -> None:
        await self._send_alert.execute(
            event="order_failed",
            title=f"Order {event.symbol} {event.outcome}",
            message=f"{event.category or 'error'}: {event.message} after {event.attempts} attempt(s)",
            severity=Severity.CRITICAL,
            metadata={"symbol": event.symbol, "signal_id": event.signal_id, "outcome": event.outcome},
        )
