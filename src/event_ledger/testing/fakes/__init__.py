"""Testing fakes – in-memory doubles for kernel ports."""
from event_ledger.testing.fakes.clock import FakeClock
from event_ledger.testing.fakes.outbox import InMemoryOutboxRepository
from event_ledger.testing.fakes.publisher import InMemoryEventPublisher
from event_ledger.kernel.time import FrozenClock

__all__ = [
    "FakeClock",
    "FrozenClock",
    "InMemoryEventPublisher",
    "InMemoryOutboxRepository",
]
