"""SQLAlchemy adapter – SqlAlchemyOutboxRepository."""
from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    LargeBinary,
    MetaData,
    String,
    Table,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from event_ledger.kernel.ddd import DomainEvent
from event_ledger.kernel.errors import SerializationError, StorageUnavailableError
from event_ledger.kernel.messaging import EventSerializer, OutboxMessage, OutboxRepository, UndecodableEvent
from event_ledger.kernel.time import Clock, SystemClock

logger = logging.getLogger(__name__)

metadata = MetaData()

outbox_messages = Table(
    "outbox_messages",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("event_id", String(64), nullable=False, index=True),
    Column("event_type", String(256), nullable=False),
    Column("aggregate_id", String(256), nullable=False),
    Column("aggregate_type", String(256), nullable=False),
    Column("payload", LargeBinary, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("published_at", DateTime(timezone=True), nullable=True),
    Column("retry_count", Integer, nullable=False, default=0),
    Index("ix_outbox_messages_pending", "published_at", "created_at", "id"),
)


@contextlib.contextmanager
def _storage(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageUnavailableError(operation, cause=exc) from exc


def _aware(value: datetime | None) -> datetime | None:
    # SQLite hands timestamps back without tzinfo; everything is stored in UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class SqlAlchemyOutboxRepository(OutboxRepository):
    """Outbox ledger stored in the ``outbox_messages`` table.

    The repository executes statements on the caller's session and never
    commits: appending shares the transaction of the aggregate's own write,
    and each dispatcher update is a single statement the caller commits.
    Events are stored as JSON envelopes produced by :class:`EventSerializer`;
    only registered event types are accepted, and a stored row that no
    longer decodes comes back carrying an :class:`UndecodableEvent`.

    Parameters
    ----------
    session:
        An :class:`~sqlalchemy.ext.asyncio.AsyncSession`.
    serializer:
        Codec for the ``payload`` column; defaults to one backed by the
        process-wide event registry.
    clock:
        Source of ``created_at`` / ``published_at`` and of the purge cutoff.
    """

    table = outbox_messages

    def __init__(
        self,
        session: AsyncSession,
        serializer: EventSerializer | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._session = session
        self._serializer = serializer or EventSerializer()
        self._clock = clock or SystemClock()

    @classmethod
    async def create_table(cls, bind: Any) -> None:
        """Create the ``outbox_messages`` table if it does not exist.

        *bind* is an :class:`~sqlalchemy.ext.asyncio.AsyncEngine`.
        """
        async with bind.begin() as conn:
            await conn.run_sync(metadata.create_all)

    @classmethod
    def factory(
        cls,
        serializer: EventSerializer | None = None,
        clock: Clock | None = None,
    ) -> Callable[[Any], "SqlAlchemyOutboxRepository"]:
        """Build repositories bound to a :class:`SqlAlchemyUnitOfWork` session.

        Pass the result to :class:`~event_ledger.application.outbox.OutboxUnitOfWork`
        or :class:`~event_ledger.application.outbox.OutboxDispatcher`.
        """
        return lambda uow: cls(uow.session, serializer, clock)

    async def append(self, event: DomainEvent) -> OutboxMessage:
        self._serializer.check_registered(event)
        message = OutboxMessage.from_event(event, now=self._clock.now())
        payload = self._serializer.serialize(event)
        with _storage("append"):
            await self._session.execute(
                insert(self.table).values(
                    id=message.id,
                    event_id=event.event_id,
                    event_type=event.event_type,
                    aggregate_id=event.aggregate_id,
                    aggregate_type=event.aggregate_type,
                    payload=payload,
                    created_at=message.created_at,
                    published_at=None,
                    retry_count=0,
                )
            )
        return message

    async def list_unpublished(self, limit: int = 100) -> list[OutboxMessage]:
        t = self.table
        stmt = (
            select(t)
            .where(t.c.published_at.is_(None))
            .order_by(t.c.created_at, t.c.id)
            .limit(limit)
        )
        with _storage("list_unpublished"):
            rows = (await self._session.execute(stmt)).fetchall()
        return [self._row_to_message(row) for row in rows]

    async def mark_published(self, message_id: str) -> None:
        t = self.table
        with _storage("mark_published"):
            await self._session.execute(
                update(t)
                .where(t.c.id == message_id, t.c.published_at.is_(None))
                .values(published_at=self._clock.now())
            )

    async def increment_retry(self, message_id: str) -> None:
        t = self.table
        with _storage("increment_retry"):
            await self._session.execute(
                update(t)
                .where(t.c.id == message_id, t.c.published_at.is_(None))
                .values(retry_count=t.c.retry_count + 1)
            )

    async def list_failed(self, max_retries: int) -> list[OutboxMessage]:
        t = self.table
        stmt = (
            select(t)
            .where(t.c.published_at.is_(None), t.c.retry_count >= max_retries)
            .order_by(t.c.created_at, t.c.id)
        )
        with _storage("list_failed"):
            rows = (await self._session.execute(stmt)).fetchall()
        return [self._row_to_message(row) for row in rows]

    async def purge_published_older_than(self, days: int) -> int:
        t = self.table
        cutoff = self._clock.now() - timedelta(days=days)
        with _storage("purge_published_older_than"):
            result = await self._session.execute(
                delete(t).where(t.c.published_at.is_not(None), t.c.published_at < cutoff)
            )
        return result.rowcount or 0

    def _decode(self, row: Any) -> DomainEvent:
        payload = bytes(row.payload)
        try:
            return self._serializer.deserialize(payload)
        except SerializationError as exc:
            logger.warning(
                "sqlalchemy.outbox_undecodable id=%s event_type=%s error=%s", row.id, row.event_type, exc.message
            )
            return UndecodableEvent(
                row.event_type,
                payload.decode(errors="replace"),
                exc.message,
                event_id=row.event_id,
                aggregate_id=row.aggregate_id,
                aggregate_type=row.aggregate_type,
                occurred_at=_aware(row.created_at),
            )

    def _row_to_message(self, row: Any) -> OutboxMessage:
        return OutboxMessage(
            id=row.id,
            event=self._decode(row),
            created_at=_aware(row.created_at),  # type: ignore[arg-type]
            published_at=_aware(row.published_at),
            retry_count=row.retry_count,
        )


__all__ = ["SqlAlchemyOutboxRepository", "metadata", "outbox_messages"]
