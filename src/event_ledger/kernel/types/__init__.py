"""Kernel value types."""
from event_ledger.kernel.types.ids import EntityId, new_id

__all__ = ["EntityId", "new_id"]
