"""Kernel – framework-agnostic building blocks."""

from event_ledger.kernel.errors import (
    ApplicationError,
    BaseError,
    DomainError,
    InfrastructureError,
    InvariantViolationError,
    NotFoundError,
    PublishError,
    SerializationError,
    StorageUnavailableError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "InfrastructureError",
    "InvariantViolationError",
    "NotFoundError",
    "PublishError",
    "SerializationError",
    "StorageUnavailableError",
    "ValidationError",
]
