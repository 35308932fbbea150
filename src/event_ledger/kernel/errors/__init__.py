"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   ├── InvariantViolationError
    │   ├── ValidationError
    │   └── NotFoundError
    ├── ApplicationError         (application.py)
    └── InfrastructureError      (infrastructure.py)
        ├── StorageUnavailableError
        ├── PublishError
        └── SerializationError
"""

from event_ledger.kernel.errors.application import ApplicationError
from event_ledger.kernel.errors.base import BaseError
from event_ledger.kernel.errors.domain import (
    DomainError,
    InvariantViolationError,
    NotFoundError,
    ValidationError,
)
from event_ledger.kernel.errors.infrastructure import (
    InfrastructureError,
    PublishError,
    SerializationError,
    StorageUnavailableError,
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
