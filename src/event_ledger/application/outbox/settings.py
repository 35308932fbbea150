"""Outbox dispatcher settings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from event_ledger.config.settings import Settings
from event_ledger.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class OutboxDispatcherSettings(Settings):
    """Tuning for :class:`~event_ledger.application.outbox.OutboxDispatcher`.

    Loaded from ``OUTBOX_BATCH_SIZE``, ``OUTBOX_POLL_INTERVAL_SECONDS`` and
    ``OUTBOX_MAX_RETRIES`` by :class:`~event_ledger.config.EnvSettingsLoader`.
    """

    _prefix: ClassVar[str] = "OUTBOX"

    batch_size: int = 100
    poll_interval_seconds: float = 1.0
    max_retries: int = 5

    def _validate(self) -> None:
        if self.batch_size <= 0:
            raise InvalidSettingValueError("batch_size", self.batch_size, "must be a positive integer")
        if self.poll_interval_seconds < 0:
            raise InvalidSettingValueError(
                "poll_interval_seconds", self.poll_interval_seconds, "must not be negative"
            )
        if self.max_retries <= 0:
            raise InvalidSettingValueError("max_retries", self.max_retries, "must be a positive integer")


__all__ = ["OutboxDispatcherSettings"]
