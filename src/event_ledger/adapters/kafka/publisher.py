"""Kafka adapter – KafkaEventPublisher."""
from __future__ import annotations

import logging
from typing import Any, Callable

from event_ledger.kernel.ddd import DomainEvent
from event_ledger.kernel.errors import SerializationError
from event_ledger.kernel.messaging import EventPublisher, EventSerializer, PublishResult
from event_ledger.resilience.retry import TenacityRetryPolicy

logger = logging.getLogger(__name__)

TopicResolver = Callable[[DomainEvent], str]


def _require_aiokafka() -> Any:
    try:
        import aiokafka  # type: ignore[import-untyped]
        return aiokafka
    except ImportError as exc:
        raise ImportError("Install 'event-ledger[kafka]' to use the Kafka adapter") from exc


def default_topic(event: DomainEvent) -> str:
    """Route by aggregate type, e.g. ``Order`` → ``order``."""
    return event.aggregate_type.lower()


class KafkaEventPublisher(EventPublisher):
    """aiokafka-backed :class:`EventPublisher`.

    Records are keyed by ``aggregate_id`` so one aggregate's events share a
    partition.  Envelope identity travels in headers so consumers can
    de-duplicate without decoding the value.  Send failures (after the
    optional *retry* policy gives up) come back as failed results.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        topic_resolver: TopicResolver | None = None,
        serializer: EventSerializer | None = None,
        retry: TenacityRetryPolicy | None = None,
        **producer_kwargs: Any,
    ) -> None:
        aiokafka = _require_aiokafka()
        self._producer = aiokafka.AIOKafkaProducer(bootstrap_servers=bootstrap_servers, **producer_kwargs)
        self._topic_resolver = topic_resolver or default_topic
        self._serializer = serializer or EventSerializer()
        self._retry = retry
        self._started = False

    async def start(self) -> None:
        await self._producer.start()
        self._started = True

    async def stop(self) -> None:
        await self._producer.stop()
        self._started = False

    async def __aenter__(self) -> "KafkaEventPublisher":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    @staticmethod
    def _headers(event: DomainEvent) -> list[tuple[str, bytes]]:
        headers = [
            ("event-id", event.event_id.encode()),
            ("event-type", event.event_type.encode()),
            ("event-version", str(event.event_version).encode()),
        ]
        if event.correlation_id:
            headers.append(("correlation-id", event.correlation_id.encode()))
        if event.causation_id:
            headers.append(("causation-id", event.causation_id.encode()))
        return headers

    async def _send(self, topic: str, value: bytes, event: DomainEvent) -> None:
        if not self._started:
            await self.start()
        await self._producer.send_and_wait(
            topic,
            value=value,
            key=event.aggregate_id.encode(),
            headers=self._headers(event),
        )

    async def publish(self, event: DomainEvent) -> PublishResult:
        try:
            value = self._serializer.serialize(event)
        except SerializationError as exc:
            return PublishResult.failed(event, exc.message)
        topic = self._topic_resolver(event)
        try:
            if self._retry is not None:
                await self._retry.execute_async(lambda: self._send(topic, value, event))
            else:
                await self._send(topic, value, event)
        except Exception as exc:  # noqa: BLE001
            logger.error("kafka.publish_failed topic=%s event_id=%s exc=%r", topic, event.event_id, exc)
            return PublishResult.failed(event, exc)
        logger.debug("kafka.published topic=%s event_id=%s", topic, event.event_id)
        return PublishResult.ok(event)


__all__ = ["KafkaEventPublisher", "TopicResolver", "default_topic"]
