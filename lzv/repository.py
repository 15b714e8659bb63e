"""Record storage behind a small repository interface."""

import copy
import logging
from typing import Generic, Optional, Protocol, TypeVar

log = logging.getLogger(__name__)

T = TypeVar('T')


class Repository(Protocol[T]):
    """Access to records of one type, keyed by their id."""

    def get(self, record_id: int) -> Optional[T]: ...

    def insert(self, record: T) -> None: ...

    def update(self, record: T) -> None: ...

    def delete(self, record_id: int) -> None: ...

    def all(self) -> list[T]: ...


class InMemoryRepository(Generic[T]):
    """Repository over an injected dict store.

    Records must have an ``id`` attribute. They are copied on every read and
    write, so callers never hold a reference into the store and computations
    always run on a stable snapshot.
    """

    def __init__(self, store: Optional[dict[int, T]] = None):
        self._store: dict[int, T] = store if store is not None else {}

    def get(self, record_id: int) -> Optional[T]:
        record = self._store.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def insert(self, record: T) -> None:
        record_id = record.id
        if record_id in self._store:
            raise KeyError(f"Datensatz {record_id} existiert bereits")
        self._store[record_id] = copy.deepcopy(record)

    def update(self, record: T) -> None:
        record_id = record.id
        if record_id not in self._store:
            raise KeyError(f"Datensatz {record_id} nicht gefunden")
        self._store[record_id] = copy.deepcopy(record)

    def delete(self, record_id: int) -> None:
        if record_id not in self._store:
            raise KeyError(f"Datensatz {record_id} nicht gefunden")
        del self._store[record_id]

    def all(self) -> list[T]:
        return [copy.deepcopy(r) for r in self._store.values()]

    def snapshot(self) -> tuple[T, ...]:
        """Immutable copy of all records, in insertion order."""
        return tuple(self.all())

    def __len__(self) -> int:
        return len(self._store)

    def insert_many(self, records: list[T]) -> None:
        for record in records:
            self.insert(record)
        log.debug("%d Datensaetze eingefuegt", len(records))
