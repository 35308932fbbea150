"""
event_ledger – aggregate event ledger with transactional-outbox dispatch.

Import path convention::

    from event_ledger.kernel.ddd import AggregateRoot, DomainEvent
    from event_ledger.kernel.messaging import OutboxRepository, EventPublisher
    from event_ledger.application.outbox import OutboxDispatcher, OutboxUnitOfWork
    from event_ledger.adapters.sqlalchemy import SqlAlchemyOutboxRepository
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
