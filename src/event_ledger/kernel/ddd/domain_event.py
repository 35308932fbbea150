"""Domain events – the immutable envelope recorded by aggregates."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime
from typing import Any

from event_ledger.kernel.types.ids import new_id

#: Field names owned by the envelope itself; everything else is payload.
ENVELOPE_FIELDS: frozenset[str] = frozenset(
    {
        "event_id",
        "occurred_at",
        "aggregate_id",
        "aggregate_type",
        "event_version",
        "causation_id",
        "correlation_id",
    }
)


@dataclasses.dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for domain events.

    Subclasses extend this with their own payload fields.  Envelope fields
    are keyword-only so payload fields may be declared without defaults.

    Example::

        @register_event("order.placed")
        @dataclasses.dataclass(frozen=True)
        class OrderPlaced(DomainEvent):
            total_cents: int

        OrderPlaced(100, aggregate_id="o-1", aggregate_type="Order")
    """

    aggregate_id: str
    aggregate_type: str
    event_version: int = 1
    causation_id: str | None = None
    correlation_id: str | None = None
    event_id: str = dataclasses.field(default_factory=new_id)
    occurred_at: datetime = dataclasses.field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        """Stable discriminator used for routing and deserialization."""
        return type(self).__dict__.get("__event_type__", type(self).__name__)

    def payload(self) -> dict[str, Any]:
        """Return the subclass-specific fields."""
        return {
            f.name: getattr(self, f.name)
            for f in dataclasses.fields(self)
            if f.name not in ENVELOPE_FIELDS
        }

    def to_dict(self) -> dict[str, Any]:
        """Full envelope as plain data (timestamps in ISO-8601)."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "event_version": self.event_version,
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "causation_id": self.causation_id,
            "correlation_id": self.correlation_id,
            "payload": self.payload(),
        }


__all__ = ["ENVELOPE_FIELDS", "DomainEvent"]
