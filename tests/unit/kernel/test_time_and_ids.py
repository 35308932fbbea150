"""Unit tests for kernel clocks and identifiers."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import pytest

from event_ledger.kernel.errors import ValidationError
from event_ledger.kernel.time import FrozenClock, SystemClock, utc_now
from event_ledger.kernel.types import EntityId, new_id


# ---------------------------------------------------------------------------
# Clocks
# ---------------------------------------------------------------------------


class TestClocks:
    def test_system_clock_is_utc(self) -> None:
        assert SystemClock().now().tzinfo is UTC

    def test_utc_now_is_aware(self) -> None:
        before = datetime.now(UTC)
        assert utc_now() >= before

    def test_frozen_clock_advance(self) -> None:
        start = datetime(2026, 3, 1, tzinfo=UTC)
        clock = FrozenClock(start)
        assert clock.now() == start
        clock.advance(days=1, seconds=30)
        assert clock.now() == start + timedelta(days=1, seconds=30)


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


class TestIds:
    def test_new_id_is_uuid7(self) -> None:
        assert uuid.UUID(new_id()).version == 7

    def test_new_ids_are_unique(self) -> None:
        assert len({new_id() for _ in range(100)}) == 100

    def test_entity_id_str_and_equality(self) -> None:
        assert str(EntityId("order-1")) == "order-1"
        assert EntityId("order-1") == EntityId("order-1")

    def test_entity_id_rejects_empty(self) -> None:
        with pytest.raises(ValidationError):
            EntityId("")

    def test_generate(self) -> None:
        assert EntityId.generate() != EntityId.generate()
