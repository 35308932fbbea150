"""Kernel messaging – publisher port used by the outbox dispatcher."""
from __future__ import annotations

import abc
import dataclasses

from event_ledger.kernel.ddd.domain_event import DomainEvent


@dataclasses.dataclass(frozen=True)
class PublishResult:
    """Outcome of handing one event to the transport."""

    event_id: str
    success: bool
    error: str | None = None

    @classmethod
    def ok(cls, event: DomainEvent) -> "PublishResult":
        return cls(event_id=event.event_id, success=True)

    @classmethod
    def failed(cls, event: DomainEvent, error: str | BaseException) -> "PublishResult":
        message = error if isinstance(error, str) else repr(error)
        return cls(event_id=event.event_id, success=False, error=message)


class EventPublisher(abc.ABC):
    """Port: forwards events to an external channel.

    Failures the publisher cannot resolve itself are reported as a failed
    :class:`PublishResult`, not raised.  Consumers must de-duplicate by
    ``event_id``: delivery is at-least-once.
    """

    @abc.abstractmethod
    async def publish(self, event: DomainEvent) -> PublishResult: ...

    async def publish_batch(self, events: list[DomainEvent]) -> list[PublishResult]:
        return [await self.publish(event) for event in events]


__all__ = ["EventPublisher", "PublishResult"]
