"""SQLAlchemy adapter – session factory, unit of work, outbox ledger."""
from event_ledger.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from event_ledger.adapters.sqlalchemy.uow import SqlAlchemyUnitOfWork
from event_ledger.adapters.sqlalchemy.outbox import SqlAlchemyOutboxRepository, metadata, outbox_messages

__all__ = [
    "SqlAlchemyOutboxRepository",
    "SqlAlchemySessionFactory",
    "SqlAlchemyUnitOfWork",
    "metadata",
    "outbox_messages",
]
