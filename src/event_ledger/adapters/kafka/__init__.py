"""Kafka adapter – outbox publisher."""
from event_ledger.adapters.kafka.publisher import KafkaEventPublisher, TopicResolver, default_topic

__all__ = ["KafkaEventPublisher", "TopicResolver", "default_topic"]
