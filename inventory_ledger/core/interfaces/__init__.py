"""Core interfaces (ports) for dependency injection."""

from inventory_ledger.core.interfaces.event_store import IEventStore
from inventory_ledger.core.interfaces.reference_store import IReferenceStore, Reference
from inventory_ledger.core.interfaces.unit_of_work import IUnitOfWork

__all__ = [
    "IEventStore",
    "IReferenceStore",
    "IUnitOfWork",
    "Reference",
]
