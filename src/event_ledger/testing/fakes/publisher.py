"""Testing fakes – InMemoryEventPublisher."""
from __future__ import annotations

from typing import Callable

from event_ledger.kernel.ddd import DomainEvent
from event_ledger.kernel.messaging import EventPublisher, PublishResult


class InMemoryEventPublisher(EventPublisher):
    """Records every delivered event; can be told to fail selected ones."""

    def __init__(self) -> None:
        self._published: list[DomainEvent] = []
        self._fail_when: Callable[[DomainEvent], bool] | None = None
        self.attempts = 0

    def fail_for(self, predicate: Callable[[DomainEvent], bool]) -> None:
        self._fail_when = predicate

    def fail_event_ids(self, *event_ids: str) -> None:
        ids = set(event_ids)
        self.fail_for(lambda event: event.event_id in ids)

    def fail_all(self) -> None:
        self.fail_for(lambda _: True)

    def recover(self) -> None:
        self._fail_when = None

    async def publish(self, event: DomainEvent) -> PublishResult:
        self.attempts += 1
        if self._fail_when is not None and self._fail_when(event):
            return PublishResult.failed(event, "simulated transport failure")
        self._published.append(event)
        return PublishResult.ok(event)

    @property
    def published(self) -> list[DomainEvent]:
        return list(self._published)

    def clear(self) -> None:
        self._published.clear()


__all__ = ["InMemoryEventPublisher"]
