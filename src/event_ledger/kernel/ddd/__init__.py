"""DDD building blocks – public re-export surface."""

from event_ledger.kernel.ddd.aggregate import AggregateRoot
from event_ledger.kernel.ddd.domain_event import ENVELOPE_FIELDS, DomainEvent
from event_ledger.kernel.ddd.entity import Entity
from event_ledger.kernel.ddd.event_registry import (
    EventRegistry,
    get_default_registry,
    register_event,
)
from event_ledger.kernel.ddd.invariant import Invariant, ensure
from event_ledger.kernel.ddd.unit_of_work import UnitOfWork

__all__ = [
    "ENVELOPE_FIELDS",
    "AggregateRoot",
    "DomainEvent",
    "Entity",
    "EventRegistry",
    "Invariant",
    "UnitOfWork",
    "ensure",
    "get_default_registry",
    "register_event",
]
