"""Outbox dispatcher – drains the ledger into an :class:`EventPublisher`."""
from __future__ import annotations

import asyncio
import contextlib
import dataclasses
from collections.abc import AsyncIterator
from typing import Awaitable, Callable

from event_ledger.application.outbox.settings import OutboxDispatcherSettings
from event_ledger.application.outbox.unit_of_work import OutboxFactory
from event_ledger.kernel.ddd import UnitOfWork
from event_ledger.kernel.errors import InfrastructureError
from event_ledger.kernel.messaging import (
    EventPublisher,
    OutboxMessage,
    OutboxRepository,
    PublishResult,
    UndecodableEvent,
)
from event_ledger.observability.logging import get_logger

logger = get_logger(__name__)

#: Escalation hook receiving rows whose retries are exhausted.
FailedMessageHandler = Callable[[list[OutboxMessage]], Awaitable[None]]


@dataclasses.dataclass(frozen=True)
class DispatchReport:
    """Counters for one dispatch cycle."""

    fetched: int = 0
    published: int = 0
    failed: int = 0
    storage_errors: int = 0


class OutboxDispatcher:
    """Polls the outbox and forwards unpublished rows, oldest first.

    Delivery is at-least-once: a crash between a successful publish and
    ``mark_published`` re-delivers the row on the next cycle.  A failed
    publish only bumps the row's retry counter; the batch carries on and the
    row is retried on later cycles until ``list_failed`` surfaces it.

    With a transactional ledger, pass *repository* as a factory together
    with *unit_of_work*: the poll, each row's bookkeeping update and the
    escalation read then run in their own committed unit, and no
    transaction is held open while publishing::

        dispatcher = OutboxDispatcher(
            SqlAlchemyOutboxRepository.factory(),
            publisher,
            unit_of_work=lambda: SqlAlchemyUnitOfWork(session_factory),
        )
        dispatcher.start()
        ...
        await dispatcher.stop(timeout=5)

    Several dispatchers may poll the same ledger concurrently; no locking is
    done here.
    """

    def __init__(
        self,
        repository: OutboxRepository | OutboxFactory,
        publisher: EventPublisher,
        settings: OutboxDispatcherSettings | None = None,
        *,
        unit_of_work: Callable[[], UnitOfWork] | None = None,
        on_failed: FailedMessageHandler | None = None,
    ) -> None:
        if unit_of_work is None and not isinstance(repository, OutboxRepository):
            raise ValueError("A repository factory requires a unit_of_work factory")
        self._repository = repository
        self._unit_of_work = unit_of_work
        self._publisher = publisher
        self._settings = settings or OutboxDispatcherSettings()
        self._on_failed = on_failed
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def settings(self) -> OutboxDispatcherSettings:
        return self._settings

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @contextlib.asynccontextmanager
    async def _ledger(self) -> AsyncIterator[OutboxRepository]:
        if self._unit_of_work is None:
            yield self._repository  # type: ignore[misc]
            return
        async with self._unit_of_work() as uow:
            if isinstance(self._repository, OutboxRepository):
                yield self._repository
            else:
                yield self._repository(uow)

    # ------------------------------------------------------------------
    # One cycle
    # ------------------------------------------------------------------

    async def dispatch_pending(self) -> DispatchReport:
        """Run a single poll cycle and report what happened."""
        try:
            async with self._ledger() as repository:
                messages = await repository.list_unpublished(self._settings.batch_size)
        except InfrastructureError as exc:
            logger.warning("outbox.poll_failed", error=exc.message)
            return DispatchReport()

        published = failed = storage_errors = 0
        for message in messages:
            result = await self._publish(message)
            try:
                async with self._ledger() as repository:
                    if result.success:
                        await repository.mark_published(message.id)
                    else:
                        await repository.increment_retry(message.id)
            except InfrastructureError as exc:
                storage_errors += 1
                logger.error(
                    "outbox.bookkeeping_failed",
                    message_id=message.id,
                    event_id=message.event.event_id,
                    published=result.success,
                    error=exc.message,
                )
                continue
            if result.success:
                published += 1
            else:
                failed += 1
                self._log_failure(message, result)

        await self._escalate()
        report = DispatchReport(
            fetched=len(messages),
            published=published,
            failed=failed,
            storage_errors=storage_errors,
        )
        if messages:
            logger.debug("outbox.cycle_done", **dataclasses.asdict(report))
        return report

    async def _publish(self, message: OutboxMessage) -> PublishResult:
        if isinstance(message.event, UndecodableEvent):
            return PublishResult.failed(message.event, message.event.reason)
        try:
            return await self._publisher.publish(message.event)
        except Exception as exc:  # noqa: BLE001
            return PublishResult.failed(message.event, exc)

    def _log_failure(self, message: OutboxMessage, result: PublishResult) -> None:
        attempts = message.retry_count + 1
        logger.warning(
            "outbox.dispatch_failed",
            message_id=message.id,
            event_id=message.event.event_id,
            event_type=message.event.event_type,
            retry_count=attempts,
            error=result.error,
        )
        if attempts == self._settings.max_retries:
            logger.error(
                "outbox.retries_exhausted",
                message_id=message.id,
                event_id=message.event.event_id,
                max_retries=self._settings.max_retries,
            )

    async def _escalate(self) -> None:
        if self._on_failed is None:
            return
        try:
            async with self._ledger() as repository:
                failed = await repository.list_failed(self._settings.max_retries)
            if failed:
                await self._on_failed(failed)
        except Exception as exc:  # noqa: BLE001
            logger.error("outbox.escalation_failed", error=repr(exc))

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        """Poll until *stop_event* is set or the task is cancelled.

        Setting the event never interrupts a batch: the current cycle
        finishes and no new one starts.
        """
        stop = stop_event or asyncio.Event()
        logger.info(
            "outbox.dispatcher_started",
            batch_size=self._settings.batch_size,
            poll_interval_seconds=self._settings.poll_interval_seconds,
        )
        try:
            while not stop.is_set():
                try:
                    await self.dispatch_pending()
                except Exception as exc:  # noqa: BLE001
                    logger.exception("outbox.cycle_crashed", error=repr(exc))
                if stop.is_set():
                    break
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(stop.wait(), timeout=self._settings.poll_interval_seconds)
        finally:
            logger.info("outbox.dispatcher_stopped")

    def start(self) -> asyncio.Task[None]:
        """Launch :meth:`run` as a background task on the running loop."""
        if self._task is not None and not self._task.done():
            return self._task
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run(self._stop_event), name="outbox-dispatcher")
        return self._task

    async def stop(self, timeout: float | None = None) -> None:
        """Stop starting new batches and wait for the loop to exit.

        When *timeout* elapses the in-flight batch is cancelled; any row it
        had not yet marked stays unpublished and is retried by the next run.
        """
        if self._task is None or self._stop_event is None:
            return
        self._stop_event.set()
        try:
            await asyncio.wait_for(self._task, timeout=timeout)
        except TimeoutError:
            logger.warning("outbox.dispatcher_abandoned_batch", timeout=timeout)
        finally:
            self._task = None
            self._stop_event = None


__all__ = ["DispatchReport", "FailedMessageHandler", "OutboxDispatcher"]
