"""Kernel messaging – outbox ledger port."""
from __future__ import annotations

import abc
import dataclasses
from datetime import datetime

from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.time import utc_now
from event_ledger.kernel.types.ids import new_id


@dataclasses.dataclass(frozen=True)
class OutboxMessage:
    """One ledger row: a recorded event plus its dispatch bookkeeping.

    ``id`` is ledger-local and distinct from ``event.event_id``.
    ``published_at`` is set exactly once; ``retry_count`` only grows and
    counts failed attempts made before publication.
    """

    id: str
    event: DomainEvent
    created_at: datetime
    published_at: datetime | None = None
    retry_count: int = 0

    @classmethod
    def from_event(cls, event: DomainEvent, *, now: datetime | None = None) -> "OutboxMessage":
        return cls(id=new_id(), event=event, created_at=now or utc_now())

    def is_published(self) -> bool:
        return self.published_at is not None

    def has_exceeded_retries(self, max_retries: int) -> bool:
        return self.retry_count >= max_retries


class OutboxRepository(abc.ABC):
    """Port: durable outbox ledger.

    Every operation is a single atomic storage mutation and is safe to retry;
    implementations raise :class:`~event_ledger.kernel.errors.StorageUnavailableError`
    when storage cannot be reached.  ``append`` participates in the caller's
    transaction and never commits on its own.
    """

    @abc.abstractmethod
    async def append(self, event: DomainEvent) -> OutboxMessage:
        """Insert one unpublished row wrapping *event*."""

    async def append_all(self, events: list[DomainEvent]) -> list[OutboxMessage]:
        """Append *events* in order."""
        return [await self.append(event) for event in events]

    @abc.abstractmethod
    async def list_unpublished(self, limit: int = 100) -> list[OutboxMessage]:
        """Up to *limit* unpublished rows, oldest first (ties by row id)."""

    @abc.abstractmethod
    async def mark_published(self, message_id: str) -> None:
        """Stamp ``published_at``; a no-op for rows already published."""

    @abc.abstractmethod
    async def increment_retry(self, message_id: str) -> None:
        """Add one failed attempt to an unpublished row."""

    @abc.abstractmethod
    async def list_failed(self, max_retries: int) -> list[OutboxMessage]:
        """Unpublished rows whose ``retry_count`` reached *max_retries*."""

    @abc.abstractmethod
    async def purge_published_older_than(self, days: int) -> int:
        """Delete rows published more than *days* ago; return the count."""


__all__ = ["OutboxMessage", "OutboxRepository"]
