"""AlertEvent (domain) ↔ AlertLogModel (ORM)."""

from __future__ import annotations

from signalgate.domain.entities.alert import AlertEvent, Severity
from signalgate.infrastructure.persistence.models.alert import AlertLogModel


class AlertMapper:

    @staticmethod
    def to_model(alert: AlertEvent) -> AlertLogModel:
        return AlertLogModel(
            event=alert.event,
            title=alert.title[:255],
            message=alert.message,
            severity=alert.severity.value,
            meta=dict(alert.metadata),
            hash_key=alert.hash_key,
            delivered_to=dict(alert.delivered_to),
            status=alert.status,
            error_msg=alert.error_msg,
            created_at_ms=int(alert.created_at * 1000),
        )

    @staticmethod
    def to_entity(model: AlertLogModel) -> AlertEvent:
        return AlertEvent(
            event=model.event,
            title=model.title,
            message=model.message,
            severity=Severity(model.severity),
            metadata=dict(model.meta or {}),
            hash_key=model.hash_key,
            delivered_to=dict(model.delivered_to or {}),
            status=model.status,
            error_msg=model.error_msg,
            created_at=model.created_at_ms / 1000.0,
        )
