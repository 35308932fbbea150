"""Kernel messaging – outbox ledger, publisher and codec ports."""
from event_ledger.kernel.messaging.outbox import OutboxMessage, OutboxRepository
from event_ledger.kernel.messaging.publisher import EventPublisher, PublishResult
from event_ledger.kernel.messaging.serializer import EventSerializer, UndecodableEvent

__all__ = [
    "EventPublisher",
    "EventSerializer",
    "OutboxMessage",
    "OutboxRepository",
    "PublishResult",
    "UndecodableEvent",
]
