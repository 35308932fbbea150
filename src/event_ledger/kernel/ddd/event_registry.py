"""EventRegistry – explicit name → event class table.

Routing and deserialization look event classes up by their stable
``event_type`` string, never by runtime type identity.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from event_ledger.kernel.ddd.domain_event import DomainEvent
from event_ledger.kernel.errors.domain import NotFoundError, ValidationError

E = TypeVar("E", bound=type[DomainEvent])


class EventRegistry:
    """Registration table keyed by ``event_type``."""

    def __init__(self) -> None:
        self._by_name: dict[str, type[DomainEvent]] = {}

    def register(self, event_cls: type[DomainEvent], name: str | None = None) -> type[DomainEvent]:
        event_type = name or event_cls.__dict__.get("__event_type__", event_cls.__name__)
        existing = self._by_name.get(event_type)
        if existing is not None and existing is not event_cls:
            raise ValidationError(
                f"Event type '{event_type}' is already registered to {existing.__qualname__}"
            )
        event_cls.__event_type__ = event_type  # type: ignore[attr-defined]
        self._by_name[event_type] = event_cls
        return event_cls

    def resolve(self, event_type: str) -> type[DomainEvent]:
        try:
            return self._by_name[event_type]
        except KeyError:
            raise NotFoundError("Event type", event_type) from None

    def __contains__(self, event_type: object) -> bool:
        return event_type in self._by_name

    def names(self) -> list[str]:
        return sorted(self._by_name)


_default_registry = EventRegistry()


def get_default_registry() -> EventRegistry:
    """Return the process-wide registry used by :func:`register_event`."""
    return _default_registry


def register_event(
    name: str | None = None,
    *,
    registry: EventRegistry | None = None,
) -> Callable[[E], E]:
    """Class decorator registering a :class:`DomainEvent` subclass.

    Apply it *outside* ``@dataclasses.dataclass``::

        @register_event("order.placed")
        @dataclasses.dataclass(frozen=True)
        class OrderPlaced(DomainEvent):
            total_cents: int
    """

    def decorator(cls: E) -> E:
        (registry or _default_registry).register(cls, name)
        return cls

    return decorator


__all__ = ["EventRegistry", "get_default_registry", "register_event"]
