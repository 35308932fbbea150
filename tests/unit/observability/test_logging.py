"""Unit tests for observability logging."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import pytest
import structlog
from structlog.testing import capture_logs

from event_ledger.application.outbox import OutboxDispatcher, OutboxDispatcherSettings
from event_ledger.kernel.ddd import DomainEvent
from event_ledger.kernel.messaging import OutboxMessage
from event_ledger.observability.logging import JsonLoggerFactory, get_logger
from event_ledger.testing.fakes import FakeClock, InMemoryEventPublisher, InMemoryOutboxRepository


@dataclass(frozen=True)
class MeterRead(DomainEvent):
    kwh: int


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


# ---------------------------------------------------------------------------
# get_logger
# ---------------------------------------------------------------------------


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger("ledger.test", component="outbox").info("hello", n=1)
        assert logs == [{"component": "outbox", "n": 1, "event": "hello", "log_level": "info"}]

    def test_without_initial_values(self) -> None:
        with capture_logs() as logs:
            get_logger().warning("plain")
        assert logs[0]["event"] == "plain"
        assert logs[0]["log_level"] == "warning"


# ---------------------------------------------------------------------------
# JsonLoggerFactory
# ---------------------------------------------------------------------------


class TestJsonLoggerFactory:
    def test_configure_installs_json_handler(self, reset_structlog) -> None:
        JsonLoggerFactory.configure(logging.DEBUG)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_configure_is_repeatable(self, reset_structlog) -> None:
        JsonLoggerFactory.configure()
        JsonLoggerFactory.configure()
        assert len(logging.getLogger().handlers) == 1


# ---------------------------------------------------------------------------
# Dispatcher log events
# ---------------------------------------------------------------------------


class TestDispatcherLogging:
    def test_failed_attempt_is_logged_with_context(self) -> None:
        async def run() -> tuple[list[dict], OutboxMessage]:
            repo = InMemoryOutboxRepository(FakeClock())
            message = await repo.append(MeterRead(42, aggregate_id="m-1", aggregate_type="Meter"))
            publisher = InMemoryEventPublisher()
            publisher.fail_all()
            dispatcher = OutboxDispatcher(repo, publisher, OutboxDispatcherSettings(max_retries=1))
            with capture_logs() as logs:
                await dispatcher.dispatch_pending()
            return logs, message

        logs, message = asyncio.run(run())
        failed = [entry for entry in logs if entry["event"] == "outbox.dispatch_failed"]
        assert len(failed) == 1
        assert failed[0]["message_id"] == message.id
        assert failed[0]["event_type"] == "MeterRead"
        assert failed[0]["retry_count"] == 1
        assert any(entry["event"] == "outbox.retries_exhausted" for entry in logs)

    def test_poll_failure_is_logged(self) -> None:
        async def run() -> list[dict]:
            repo = InMemoryOutboxRepository(FakeClock())
            repo.fail_next("list_unpublished")
            dispatcher = OutboxDispatcher(repo, InMemoryEventPublisher())
            with capture_logs() as logs:
                await dispatcher.dispatch_pending()
            return logs

        logs = asyncio.run(run())
        assert [entry["event"] for entry in logs][:1] == ["outbox.poll_failed"]
        assert logs[0]["log_level"] == "warning"
