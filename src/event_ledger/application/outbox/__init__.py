"""Application outbox – dispatcher, settings and transactional boundary."""
from event_ledger.application.outbox.dispatcher import DispatchReport, FailedMessageHandler, OutboxDispatcher
from event_ledger.application.outbox.settings import OutboxDispatcherSettings
from event_ledger.application.outbox.unit_of_work import OutboxFactory, OutboxUnitOfWork

__all__ = [
    "DispatchReport",
    "FailedMessageHandler",
    "OutboxDispatcher",
    "OutboxDispatcherSettings",
    "OutboxFactory",
    "OutboxUnitOfWork",
]
