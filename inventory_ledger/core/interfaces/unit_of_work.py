"""Transaction scopes spanning the event and reference stores."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from inventory_ledger.core.interfaces.event_store import IEventStore
from inventory_ledger.core.interfaces.reference_store import IReferenceStore


class IUnitOfWork(ABC):
    """
    Pair of stores sharing one connection.

    An unscoped unit of work runs each call in its own short transaction.
    ``write()`` and ``read()`` return scoped copies bound to a single
    transaction.
    """

    events: IEventStore
    references: IReferenceStore

    @abstractmethod
    def write(self, material_id: str | None = None) -> AbstractAsyncContextManager["IUnitOfWork"]:
        """
        Serialized write scope.

        Holds the writer lock from before the first read until commit, so a
        read-check-write sequence for ``material_id`` cannot interleave with
        another writer.
        """
        pass

    @abstractmethod
    def read(self) -> AbstractAsyncContextManager["IUnitOfWork"]:
        """Read scope in which every query sees the same committed snapshot."""
        pass
