"""Kernel messaging – JSON codec for domain events."""
from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from typing import Any

from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.ddd.event_registry import EventRegistry, get_default_registry
from event_ledger.kernel.errors import NotFoundError, SerializationError


@dataclasses.dataclass(frozen=True)
class UndecodableEvent(DomainEvent):
    """Stand-in for a stored envelope that cannot be rebuilt.

    Ledgers return it in place of the original event so one bad row does
    not hide the rows around it; dispatchers count it as a failed attempt.
    """

    stored_type: str
    raw: str
    reason: str

    @property
    def event_type(self) -> str:
        return self.stored_type


class EventSerializer:
    """Encode events as JSON envelopes and decode them via an :class:`EventRegistry`.

    Payload fields must be JSON-native values for the round trip to be
    value-equal.
    """

    def __init__(self, registry: EventRegistry | None = None) -> None:
        self._registry = registry or get_default_registry()

    def check_registered(self, event: DomainEvent) -> None:
        """Raise :class:`SerializationError` unless *event* can be decoded again."""
        event_type = event.event_type
        if event_type not in self._registry or self._registry.resolve(event_type) is not type(event):
            raise SerializationError(
                f"Event type '{event_type}' is not registered", payload_type=event_type
            )

    def serialize(self, event: DomainEvent) -> bytes:
        try:
            return json.dumps(event.to_dict(), ensure_ascii=False).encode()
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot serialize event '{event.event_type}'",
                payload_type=event.event_type,
                cause=exc,
            ) from exc

    def deserialize(self, data: bytes | str) -> DomainEvent:
        try:
            raw: dict[str, Any] = json.loads(data)
            event_type = raw["event_type"]
        except (TypeError, ValueError, KeyError) as exc:
            raise SerializationError("Malformed event envelope", cause=exc) from exc
        try:
            event_cls = self._registry.resolve(event_type)
        except NotFoundError as exc:
            raise SerializationError(
                f"Unknown event type '{event_type}'", payload_type=event_type, cause=exc
            ) from exc
        try:
            return event_cls(
                **raw.get("payload", {}),
                event_id=raw["event_id"],
                occurred_at=datetime.fromisoformat(raw["occurred_at"]),
                aggregate_id=raw["aggregate_id"],
                aggregate_type=raw["aggregate_type"],
                event_version=raw.get("event_version", 1),
                causation_id=raw.get("causation_id"),
                correlation_id=raw.get("correlation_id"),
            )
        except (TypeError, ValueError, KeyError) as exc:
            raise SerializationError(
                f"Cannot rebuild event '{event_type}'", payload_type=event_type, cause=exc
            ) from exc


__all__ = ["EventSerializer", "UndecodableEvent"]
