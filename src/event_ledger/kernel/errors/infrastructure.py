"""Infrastructure errors – ledger storage and transport failures."""

from __future__ import annotations

from typing import Any

from event_ledger.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """I/O failure that is not a business rule violation.

    Infrastructure errors are transient from the caller's point of view:
    retrying the same operation at the same layer is always safe.
    """

    default_code = "infrastructure_error"


class StorageUnavailableError(InfrastructureError):
    """A ledger operation could not reach or mutate its storage."""

    default_code = "storage_unavailable"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Outbox storage unavailable during '{operation}'", **kwargs)
        self.operation = operation


class PublishError(InfrastructureError):
    """The transport refused or failed to accept an event."""

    default_code = "publish_error"

    def __init__(
        self,
        message: str,
        *,
        event_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.event_id = event_id


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize an event payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


__all__ = [
    "InfrastructureError",
    "PublishError",
    "SerializationError",
    "StorageUnavailableError",
]
