"""OutboxUnitOfWork – saves aggregate events with the state change that produced them."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from event_ledger.kernel.ddd import AggregateRoot, UnitOfWork
from event_ledger.kernel.messaging import OutboxRepository
from event_ledger.kernel.time import Clock, SystemClock
from event_ledger.observability.logging import get_logger

logger = get_logger(__name__)

OutboxFactory = Callable[[UnitOfWork], OutboxRepository]


class OutboxUnitOfWork(UnitOfWork):
    """Wraps a unit of work so that pending aggregate events reach the outbox.

    On commit, every registered aggregate's pending events are appended to
    the outbox inside the wrapped transaction, the transaction commits, and
    only then are the aggregates stamped (created/updated audit fields,
    version bump) and their buffers cleared.  If anything fails before the
    commit succeeds the transaction is rolled back and the buffers are left
    intact.

    *outbox* is either a repository or a factory receiving the wrapped unit
    of work, for repositories bound to its session::

        uow = OutboxUnitOfWork(
            SqlAlchemyUnitOfWork(session_factory),
            SqlAlchemyOutboxRepository.factory(),
        )
        async with uow:
            await orders.save(order)
            uow.register(order, actor="user-1")
    """

    def __init__(
        self,
        inner: UnitOfWork,
        outbox: OutboxRepository | OutboxFactory,
        clock: Clock | None = None,
    ) -> None:
        self._inner = inner
        self._outbox = outbox
        self._clock = clock or SystemClock()
        self._tracked: list[tuple[AggregateRoot, str, datetime | None]] = []

    @property
    def inner(self) -> UnitOfWork:
        return self._inner

    def register(self, aggregate: AggregateRoot, *, actor: str, now: datetime | None = None) -> None:
        """Track *aggregate* so its events are saved on commit.

        *now* fixes the created/updated timestamp; by default the clock is
        read once the commit succeeds.  Registering the same aggregate again
        replaces its actor and timestamp.
        """
        for index, (tracked, _, _) in enumerate(self._tracked):
            if tracked is aggregate:
                self._tracked[index] = (aggregate, actor, now)
                return
        self._tracked.append((aggregate, actor, now))

    def _resolve_outbox(self) -> OutboxRepository:
        if isinstance(self._outbox, OutboxRepository):
            return self._outbox
        return self._outbox(self._inner)

    async def _append_pending(self) -> int:
        outbox = self._resolve_outbox()
        appended = 0
        for aggregate, _, _ in self._tracked:
            appended += len(await outbox.append_all(aggregate.pending_events()))
        return appended

    def _after_commit(self) -> None:
        committed_at = self._clock.now()
        for aggregate, actor, at in self._tracked:
            if aggregate.version == 0:
                aggregate.mark_as_created(actor, at or committed_at)
            else:
                aggregate.mark_as_updated(actor, at or committed_at)
            aggregate.increment_version()
            aggregate.clear_events()
        self._tracked.clear()

    async def commit(self) -> None:
        try:
            appended = await self._append_pending()
        except BaseException:
            await self.rollback()
            raise
        await self._inner.commit()
        logger.debug("outbox.uow_committed", aggregates=len(self._tracked), events=appended)
        self._after_commit()

    async def rollback(self) -> None:
        await self._inner.rollback()
        self._tracked.clear()

    async def __aenter__(self) -> "OutboxUnitOfWork":
        await self._inner.__aenter__()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is None:
            try:
                await self._append_pending()
            except BaseException as exc:
                self._tracked.clear()
                await self._inner.__aexit__(type(exc), exc, exc.__traceback__)
                raise
        else:
            self._tracked.clear()
        await self._inner.__aexit__(exc_type, exc_val, exc_tb)
        if exc_type is None:
            self._after_commit()


__all__ = ["OutboxFactory", "OutboxUnitOfWork"]
