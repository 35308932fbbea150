"""String-based identifier value objects."""

from __future__ import annotations

import dataclasses

import uuid_utils

from event_ledger.kernel.errors.domain import ValidationError


def new_id() -> str:
    """Return a new time-ordered UUID v7 string."""
    return str(uuid_utils.uuid7())


@dataclasses.dataclass(frozen=True, slots=True)
class EntityId:
    """Aggregate / entity identifier.

    Examples::

        eid = EntityId.generate()           # new time-ordered id
        eid = EntityId("order-123")         # from an existing string
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValidationError(f"{type(self).__name__} must not be empty")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> "EntityId":
        return cls(new_id())


__all__ = ["EntityId", "new_id"]
