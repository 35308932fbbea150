"""Observability – structured logging helpers."""
from event_ledger.observability.logging.factory import JsonLoggerFactory
from event_ledger.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
