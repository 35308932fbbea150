"""Unit tests for messaging ports – OutboxMessage, PublishResult, EventSerializer."""

from __future__ import annotations

import asyncio
import dataclasses
import json
from dataclasses import dataclass
from datetime import UTC, datetime

import pytest

from event_ledger.kernel.ddd import DomainEvent, EventRegistry, register_event
from event_ledger.kernel.errors import SerializationError
from event_ledger.kernel.messaging import (
    EventPublisher,
    EventSerializer,
    OutboxMessage,
    PublishResult,
)

registry = EventRegistry()
T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@register_event("invoice.issued", registry=registry)
@dataclass(frozen=True)
class InvoiceIssued(DomainEvent):
    amount_cents: int
    lines: list = dataclasses.field(default_factory=list, hash=False)


@dataclass(frozen=True)
class NotRegistered(DomainEvent):
    pass


def _event(**kwargs) -> InvoiceIssued:
    return InvoiceIssued(
        kwargs.pop("amount_cents", 1200),
        aggregate_id="inv-1",
        aggregate_type="Invoice",
        **kwargs,
    )


# ---------------------------------------------------------------------------
# OutboxMessage
# ---------------------------------------------------------------------------


class TestOutboxMessage:
    def test_from_event_defaults(self) -> None:
        evt = _event()
        msg = OutboxMessage.from_event(evt, now=T0)
        assert msg.event is evt
        assert msg.created_at == T0
        assert msg.published_at is None
        assert msg.retry_count == 0

    def test_row_id_distinct_from_event_id(self) -> None:
        evt = _event()
        msg = OutboxMessage.from_event(evt)
        assert msg.id
        assert msg.id != evt.event_id

    def test_row_ids_unique(self) -> None:
        evt = _event()
        assert OutboxMessage.from_event(evt).id != OutboxMessage.from_event(evt).id

    def test_is_published(self) -> None:
        msg = OutboxMessage.from_event(_event(), now=T0)
        assert msg.is_published() is False
        assert dataclasses.replace(msg, published_at=T0).is_published() is True

    @pytest.mark.parametrize(("retries", "expected"), [(0, False), (2, False), (3, True), (4, True)])
    def test_has_exceeded_retries(self, retries: int, expected: bool) -> None:
        msg = dataclasses.replace(OutboxMessage.from_event(_event()), retry_count=retries)
        assert msg.has_exceeded_retries(3) is expected


# ---------------------------------------------------------------------------
# PublishResult / EventPublisher
# ---------------------------------------------------------------------------


class _HalfBroken(EventPublisher):
    async def publish(self, event: DomainEvent) -> PublishResult:
        if getattr(event, "amount_cents", 0) < 0:
            return PublishResult.failed(event, "negative")
        return PublishResult.ok(event)


class TestPublishResult:
    def test_ok(self) -> None:
        evt = _event()
        result = PublishResult.ok(evt)
        assert result.success is True
        assert result.event_id == evt.event_id
        assert result.error is None

    def test_failed_from_exception(self) -> None:
        result = PublishResult.failed(_event(), ConnectionError("refused"))
        assert result.success is False
        assert "refused" in (result.error or "")

    def test_publish_batch_default_is_sequential(self) -> None:
        events = [_event(amount_cents=1), _event(amount_cents=-1), _event(amount_cents=2)]
        results = asyncio.run(_HalfBroken().publish_batch(events))
        assert [r.success for r in results] == [True, False, True]
        assert [r.event_id for r in results] == [e.event_id for e in events]


# ---------------------------------------------------------------------------
# EventSerializer
# ---------------------------------------------------------------------------


class TestEventSerializer:
    def test_serialize_produces_json_envelope(self) -> None:
        evt = _event(correlation_id="corr-1")
        data = json.loads(EventSerializer(registry).serialize(evt))
        assert data["event_type"] == "invoice.issued"
        assert data["payload"] == {"amount_cents": 1200, "lines": []}
        assert data["correlation_id"] == "corr-1"

    def test_round_trip_is_value_equal(self) -> None:
        ser = EventSerializer(registry)
        evt = _event(lines=["a", "b"], causation_id="cmd-9", event_version=3)
        restored = ser.deserialize(ser.serialize(evt))
        assert restored == evt
        assert type(restored) is InvoiceIssued

    def test_deserialize_accepts_str(self) -> None:
        ser = EventSerializer(registry)
        evt = _event()
        assert ser.deserialize(ser.serialize(evt).decode()) == evt

    def test_unknown_type_raises(self) -> None:
        ser = EventSerializer(registry)
        data = ser.serialize(NotRegistered(aggregate_id="x", aggregate_type="X"))
        with pytest.raises(SerializationError, match="Unknown event type"):
            ser.deserialize(data)

    def test_malformed_json_raises(self) -> None:
        with pytest.raises(SerializationError):
            EventSerializer(registry).deserialize(b"{not json")

    def test_missing_envelope_field_raises(self) -> None:
        with pytest.raises(SerializationError):
            EventSerializer(registry).deserialize(b'{"event_type": "invoice.issued", "payload": {}}')

    def test_non_json_payload_raises(self) -> None:
        evt = _event(lines=[object()])
        with pytest.raises(SerializationError) as info:
            EventSerializer(registry).serialize(evt)
        assert info.value.payload_type == "invoice.issued"

    def test_check_registered(self) -> None:
        ser = EventSerializer(registry)
        ser.check_registered(_event())
        with pytest.raises(SerializationError, match="not registered") as info:
            ser.check_registered(NotRegistered(aggregate_id="x", aggregate_type="X"))
        assert info.value.payload_type == "NotRegistered"
