"""AggregateRoot – buffers domain events and tracks lifecycle metadata."""

from __future__ import annotations

from collections.abc import Hashable
from datetime import datetime
from typing import Any

from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.ddd.entity import Entity
from event_ledger.kernel.ddd.invariant import Invariant
from event_ledger.kernel.time import utc_now


class AggregateRoot(Entity):
    """Aggregate root – owns its pending domain events.

    Domain methods validate their invariants, mutate state and call
    :meth:`_record_event`.  The buffer is never drained by the aggregate
    itself: the persistence boundary copies it out with
    :meth:`pending_events`, appends the copies to the outbox in the same
    transaction as the state write, and calls :meth:`clear_events` once that
    transaction has committed.

    Lifecycle methods (``mark_as_created``, ``mark_as_updated``,
    ``increment_version``) are meant for the persistence boundary, not for
    domain callers.

    Example::

        class Order(AggregateRoot):
            def place(self, total_cents: int) -> None:
                Invariant.require(total_cents > 0, "Order total must be positive")
                self._record_event(OrderPlaced(total_cents, **self._event_metadata()))
    """

    _version: int
    _events: list[DomainEvent]

    def __init__(self, id: Hashable) -> None:  # noqa: A002
        super().__init__(id)
        self._version = 0
        self._events = []
        self._created_at: datetime | None = None
        self._created_by: str | None = None
        self._updated_at: datetime | None = None
        self._updated_by: str | None = None
        self._deleted_at: datetime | None = None
        self._deleted_by: str | None = None

    # ------------------------------------------------------------------
    # Event buffer
    # ------------------------------------------------------------------

    @classmethod
    def aggregate_type(cls) -> str:
        """Logical type name stamped on every recorded event."""
        return cls.__name__

    def _event_metadata(self, **overrides: Any) -> dict[str, Any]:
        """Envelope fields identifying this aggregate as the event source."""
        return {"aggregate_id": str(self._id), "aggregate_type": self.aggregate_type(), **overrides}

    def _record_event(self, event: DomainEvent) -> None:
        self._events.append(event)

    def pending_events(self) -> list[DomainEvent]:
        """Return a fresh snapshot of the buffer, oldest first."""
        return list(self._events)

    def clear_events(self) -> None:
        """Empty the buffer; a no-op when it is already empty."""
        self._events.clear()

    def event_count(self) -> int:
        return len(self._events)

    def has_events(self) -> bool:
        return bool(self._events)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mark_as_created(self, by: str, at: datetime | None = None) -> None:
        at = at or utc_now()
        self._created_at, self._created_by = at, by
        self._updated_at, self._updated_by = at, by

    def mark_as_updated(self, by: str, at: datetime | None = None) -> None:
        self._updated_at = at or utc_now()
        self._updated_by = by

    def soft_delete(self, by: str, at: datetime | None = None) -> None:
        Invariant.require(self._deleted_at is None, "Aggregate is already deleted")
        at = at or utc_now()
        self._deleted_at, self._deleted_by = at, by
        self._updated_at, self._updated_by = at, by

    def restore(self, by: str, at: datetime | None = None) -> None:
        Invariant.require(self._deleted_at is not None, "Aggregate is not deleted")
        self._deleted_at, self._deleted_by = None, None
        self._updated_at, self._updated_by = at or utc_now(), by

    def is_deleted(self) -> bool:
        return self._deleted_at is not None

    def is_active(self) -> bool:
        return not self.is_deleted()

    def increment_version(self) -> None:
        self._version += 1

    @property
    def version(self) -> int:
        return self._version

    @property
    def created_at(self) -> datetime | None:
        return self._created_at

    @property
    def created_by(self) -> str | None:
        return self._created_by

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    @property
    def updated_by(self) -> str | None:
        return self._updated_by

    @property
    def deleted_at(self) -> datetime | None:
        return self._deleted_at

    @property
    def deleted_by(self) -> str | None:
        return self._deleted_by


__all__ = ["AggregateRoot"]
