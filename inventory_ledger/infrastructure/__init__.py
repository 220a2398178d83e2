"""Infrastructure layer implementations."""

from inventory_ledger.infrastructure import storage

__all__ = ["storage"]
